from __future__ import annotations


class HoopsGridError(Exception):
    """Base class for grid core errors."""


class MalformedLeagueError(HoopsGridError, ValueError):
    """The league document is missing something the core cannot do without."""


class DataInsufficiencyError(HoopsGridError):
    """The league does not hold enough variety to build a grid."""


class InsufficientVarietyError(DataInsufficiencyError):
    def __init__(self, available_teams: int, available_achievements: int) -> None:
        self.available_teams = available_teams
        self.available_achievements = available_achievements
        super().__init__(
            f"Couldn't generate a valid grid. Available teams: {available_teams}, "
            f"available achievements: {available_achievements}."
        )


class AnswerValidationError(HoopsGridError, ValueError):
    """An answer was rejected without touching session state."""
