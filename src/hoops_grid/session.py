from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from .errors import AnswerValidationError
from .generator import GRID_SIZE, Cell, Game
from .league import League
from .rarity import AnswerScore, rank_eligible, rarity_label, score_answer

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CellAnswer:
    player_id: int
    player_name: str
    is_correct: bool
    rarity: int
    rank: int | None
    eligible_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "is_correct": self.is_correct,
            "rarity": self.rarity,
            "rank": self.rank,
            "eligible_count": self.eligible_count,
        }


@dataclass(slots=True, frozen=True)
class AnswerResult:
    row: int
    col: int
    answer: CellAnswer
    rarity_label: str = ""
    correct_players: tuple[int, ...] = ()

    @property
    def is_correct(self) -> bool:
        return self.answer.is_correct


@dataclass(slots=True)
class GameSession:
    """Answers for one player working through one Game.

    The session is only ever mutated by ``submit_answer``, and each cell can
    be scored once.
    """

    game: Game
    league: League
    session_id: str = field(default_factory=lambda: uuid4().hex)
    answers: dict[Cell, CellAnswer] = field(default_factory=dict)

    @property
    def score(self) -> int:
        return sum(1 for answer in self.answers.values() if answer.is_correct)

    @property
    def completed(self) -> bool:
        return len(self.answers) == GRID_SIZE * GRID_SIZE

    def submit_answer(self, row: int, col: int, player_id: int) -> AnswerResult:
        if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
            raise AnswerValidationError(f"Cell {row}_{col} is outside the grid.")
        if (row, col) in self.answers:
            raise AnswerValidationError(f"Cell {row}_{col} has already been answered.")
        player = self.league.get_player(player_id)
        if player is None:
            raise AnswerValidationError(f"Unknown player: {player_id}")

        eligible = self.game.eligible(row, col)
        scored: AnswerScore = score_answer(eligible, player_id, self.league)
        answer = CellAnswer(
            player_id=player_id,
            player_name=player.name,
            is_correct=scored.is_correct,
            rarity=scored.rarity,
            rank=scored.rank,
            eligible_count=scored.eligible_count,
        )
        self.answers[(row, col)] = answer
        logger.debug(
            "Session %s cell %d_%d: player %s correct=%s rarity=%d",
            self.session_id,
            row,
            col,
            player_id,
            answer.is_correct,
            answer.rarity,
        )

        if answer.is_correct:
            return AnswerResult(row, col, answer, rarity_label=rarity_label(answer.rarity))
        revealed = tuple(p.player_id for p in rank_eligible(eligible, self.league))
        return AnswerResult(row, col, answer, correct_players=revealed)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.session_id,
            "game_id": self.game.game_id,
            "score": self.score,
            "completed": self.completed,
            "answers": {f"{row}_{col}": answer.to_dict() for (row, col), answer in sorted(self.answers.items())},
        }
