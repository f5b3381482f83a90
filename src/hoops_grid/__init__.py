from .eligibility import AchievementCriterion, GridCriterion, TeamCriterion, resolve_cell
from .errors import (
    AnswerValidationError,
    DataInsufficiencyError,
    HoopsGridError,
    InsufficientVarietyError,
    MalformedLeagueError,
)
from .generator import Game, GridGenerator, generate_grid
from .league import League, load_league
from .rarity import AnswerScore, cell_rarity, score_answer
from .session import AnswerResult, GameSession

__all__ = [
    "AchievementCriterion",
    "AnswerResult",
    "AnswerScore",
    "AnswerValidationError",
    "DataInsufficiencyError",
    "Game",
    "GameSession",
    "GridCriterion",
    "GridGenerator",
    "HoopsGridError",
    "InsufficientVarietyError",
    "League",
    "MalformedLeagueError",
    "TeamCriterion",
    "cell_rarity",
    "generate_grid",
    "load_league",
    "resolve_cell",
    "score_answer",
]
