from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Sequence
from uuid import uuid4

from .achievements import achievement_counts
from .config import (
    GRID_SHAPE_WEIGHTS,
    MAX_GRID_ATTEMPTS,
    MIN_ACHIEVEMENT_PLAYERS,
    MIN_GRID_TEAMS,
    MIN_TEAM_PLAYERS,
    PURE_TEAM_FALLBACK_TEAMS,
)
from .eligibility import (
    GridCriterion,
    achievement_criterion,
    criterion_players,
    team_criterion,
)
from .errors import InsufficientVarietyError
from .league import League

logger = logging.getLogger(__name__)

GRID_SIZE = 3

Cell = tuple[int, int]
Axes = tuple[list[GridCriterion], list[GridCriterion]]


@dataclass(slots=True, frozen=True)
class Game:
    row_criteria: tuple[GridCriterion, ...]
    column_criteria: tuple[GridCriterion, ...]
    correct_answers: Mapping[Cell, frozenset[int]]
    shape: str = ""
    game_id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        if len(self.row_criteria) != GRID_SIZE or len(self.column_criteria) != GRID_SIZE:
            raise ValueError("A game needs exactly three row and three column criteria.")
        answers: dict[Cell, frozenset[int]] = {}
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                eligible = frozenset(self.correct_answers.get((row, col), ()))
                if not eligible:
                    raise ValueError(f"Cell {row}_{col} has no eligible players.")
                answers[(row, col)] = eligible
        object.__setattr__(self, "correct_answers", MappingProxyType(answers))

    def eligible(self, row: int, col: int) -> frozenset[int]:
        return self.correct_answers[(row, col)]

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.game_id,
            "shape": self.shape,
            "row_criteria": [c.to_dict() for c in self.row_criteria],
            "column_criteria": [c.to_dict() for c in self.column_criteria],
            "correct_answers": {
                f"{row}_{col}": sorted(ids) for (row, col), ids in self.correct_answers.items()
            },
        }


class GridGenerator:
    """Randomized search for a 3x3 grid whose nine cells all have answers.

    Each attempt draws a grid shape from ``GRID_SHAPE_WEIGHTS``, samples teams
    and achievements uniformly without replacement, and keeps the first grid
    that resolves every cell. The attempt budget is bounded; when it runs out
    the generator falls back to a pure team grid or raises
    :class:`InsufficientVarietyError` with the pool sizes.
    """

    def __init__(
        self,
        league: League,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        max_attempts: int = MAX_GRID_ATTEMPTS,
        min_team_players: int = MIN_TEAM_PLAYERS,
        min_achievement_players: int = MIN_ACHIEVEMENT_PLAYERS,
        shape_weights: Sequence[tuple[str, float]] = GRID_SHAPE_WEIGHTS,
    ) -> None:
        self.league = league
        self._rng = rng if rng is not None else random.Random(seed)
        self.max_attempts = max(0, max_attempts)
        self.min_team_players = min_team_players
        self.min_achievement_players = min_achievement_players
        self.shape_weights = tuple(shape_weights)
        self._criterion_sets: dict[GridCriterion, frozenset[int]] = {}
        self._builders: dict[str, tuple[Callable[[int, int], bool], Callable[[list[int], list[str]], Axes]]] = {
            "pure_teams": (lambda t, a: t >= MIN_GRID_TEAMS, self._pure_teams),
            "mixed": (lambda t, a: t >= 4 and a >= 2, self._mixed),
            "team_achievements_by_teams": (lambda t, a: t >= 4 and a >= 2, self._team_achievements_by_teams),
            "teams_by_team_achievements": (lambda t, a: t >= 4 and a >= 2, self._teams_by_team_achievements),
            "heavy_achievements": (lambda t, a: t >= 2 and a >= 4, self._heavy_achievements),
            "generic": (lambda t, a: t >= 3 and a >= (2 if t >= 4 else 3), self._generic),
        }
        unknown = [name for name, _weight in self.shape_weights if name not in self._builders]
        if unknown:
            raise ValueError(f"Unknown grid shapes: {', '.join(unknown)}")

    def _players(self, criterion: GridCriterion) -> frozenset[int]:
        cached = self._criterion_sets.get(criterion)
        if cached is None:
            cached = criterion_players(criterion, self.league)
            self._criterion_sets[criterion] = cached
        return cached

    def eligible_teams(self) -> list[int]:
        return sorted(
            team.team_id
            for team in self.league.teams
            if len(self.league.team_player_ids(team.team_id)) >= self.min_team_players
        )

    def eligible_achievements(self) -> list[str]:
        counts = achievement_counts(self.league.players, self.league.indices)
        return [aid for aid, count in counts.items() if count >= self.min_achievement_players]

    def feasible_shapes(self, team_count: int, achievement_count: int) -> list[tuple[str, float]]:
        return [
            (name, weight)
            for name, weight in self.shape_weights
            if weight > 0 and self._builders[name][0](team_count, achievement_count)
        ]

    def _choose_shape(self, shapes: list[tuple[str, float]]) -> str:
        names = [name for name, _weight in shapes]
        weights = [weight for _name, weight in shapes]
        return self._rng.choices(names, weights=weights, k=1)[0]

    def _teams(self, team_ids: Sequence[int]) -> list[GridCriterion]:
        return [team_criterion(self.league, tid) for tid in team_ids]

    def _achievements(self, achievement_ids: Sequence[str]) -> list[GridCriterion]:
        return [achievement_criterion(aid) for aid in achievement_ids]

    def _pure_teams(self, teams: list[int], achievements: list[str]) -> Axes:
        if len(teams) >= 2 * GRID_SIZE:
            picked = self._rng.sample(teams, 2 * GRID_SIZE)
            return self._teams(picked[3:]), self._teams(picked[:3])
        # Small leagues reuse the same pool on both axes; the diagonal is a team's own roster.
        return self._teams(self._rng.sample(teams, GRID_SIZE)), self._teams(self._rng.sample(teams, GRID_SIZE))

    def _mixed(self, teams: list[int], achievements: list[str]) -> Axes:
        picked = self._rng.sample(teams, 4)
        feats = self._rng.sample(achievements, 2)
        columns = self._teams(picked[:2]) + self._achievements(feats[:1])
        rows = self._teams(picked[2:]) + self._achievements(feats[1:])
        return rows, columns

    def _team_achievements_by_teams(self, teams: list[int], achievements: list[str]) -> Axes:
        picked = self._rng.sample(teams, 4)
        feats = self._rng.sample(achievements, 2)
        return self._teams(picked[1:]), self._teams(picked[:1]) + self._achievements(feats)

    def _teams_by_team_achievements(self, teams: list[int], achievements: list[str]) -> Axes:
        picked = self._rng.sample(teams, 4)
        feats = self._rng.sample(achievements, 2)
        return self._teams(picked[3:]) + self._achievements(feats), self._teams(picked[:3])

    def _heavy_achievements(self, teams: list[int], achievements: list[str]) -> Axes:
        picked = self._rng.sample(teams, 2)
        feats = self._rng.sample(achievements, 4)
        columns = self._teams(picked[:1]) + self._achievements(feats[:2])
        rows = self._teams(picked[1:]) + self._achievements(feats[2:])
        return rows, columns

    def _generic(self, teams: list[int], achievements: list[str]) -> Axes:
        picked = self._rng.sample(teams, min(4, len(teams)))
        row_teams = picked[3:4]
        feats = self._rng.sample(achievements, GRID_SIZE - len(row_teams))
        return self._teams(row_teams) + self._achievements(feats), self._teams(picked[:3])

    def correct_answers(
        self,
        rows: Sequence[GridCriterion],
        columns: Sequence[GridCriterion],
    ) -> dict[Cell, frozenset[int]] | None:
        """Resolve all nine cells, or ``None`` as soon as one comes up empty."""
        answers: dict[Cell, frozenset[int]] = {}
        for r, row in enumerate(rows):
            row_players = self._players(row)
            for c, column in enumerate(columns):
                eligible = row_players & self._players(column)
                if not eligible:
                    return None
                answers[(r, c)] = eligible
        return answers

    def generate(self) -> Game:
        teams = self.eligible_teams()
        achievements = self.eligible_achievements()
        if len(teams) < MIN_GRID_TEAMS:
            raise InsufficientVarietyError(len(teams), len(achievements))

        shapes = self.feasible_shapes(len(teams), len(achievements))
        logger.debug(
            "Grid pool: %d teams, %d achievements, shapes=%s",
            len(teams),
            len(achievements),
            [name for name, _weight in shapes],
        )
        for attempt in range(1, self.max_attempts + 1):
            if not shapes:
                break
            shape = self._choose_shape(shapes)
            rows, columns = self._builders[shape][1](teams, achievements)
            answers = self.correct_answers(rows, columns)
            if answers is not None:
                logger.info("Generated %s grid after %d attempt(s)", shape, attempt)
                return Game(tuple(rows), tuple(columns), answers, shape=shape)

        if len(teams) >= PURE_TEAM_FALLBACK_TEAMS:
            logger.warning("Grid attempts exhausted; falling back to a pure team grid")
            rows, columns = self._pure_teams(teams, achievements)
            answers = self.correct_answers(rows, columns)
            if answers is not None:
                return Game(tuple(rows), tuple(columns), answers, shape="pure_teams")

        raise InsufficientVarietyError(len(teams), len(achievements))


def generate_grid(
    league: League,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> Game:
    return GridGenerator(league, seed=seed, rng=rng).generate()
