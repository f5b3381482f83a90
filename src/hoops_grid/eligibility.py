from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .achievements import ACHIEVEMENTS, achievement_label, evaluate_achievement
from .league import League


@dataclass(slots=True, frozen=True)
class TeamCriterion:
    team_id: int
    label: str = ""

    kind = "team"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "value": self.team_id, "label": self.label}


@dataclass(slots=True, frozen=True)
class AchievementCriterion:
    achievement_id: str
    label: str = ""

    kind = "achievement"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "value": self.achievement_id, "label": self.label}


GridCriterion = Union[TeamCriterion, AchievementCriterion]


def team_criterion(league: League, team_id: int) -> TeamCriterion:
    return TeamCriterion(team_id=team_id, label=league.team_label(team_id))


def achievement_criterion(achievement_id: str) -> AchievementCriterion:
    if achievement_id not in ACHIEVEMENTS:
        raise ValueError(f"Unknown achievement: {achievement_id}")
    return AchievementCriterion(achievement_id=achievement_id, label=achievement_label(achievement_id))


def criterion_players(criterion: GridCriterion, league: League) -> frozenset[int]:
    """Ids of every player satisfying one criterion.

    A team criterion counts any recorded game for that team, so a player who
    logged a handful of games after a mid-season trade is included.
    """
    if isinstance(criterion, TeamCriterion):
        return league.team_player_ids(criterion.team_id)
    if isinstance(criterion, AchievementCriterion):
        return frozenset(
            p.player_id
            for p in league.players
            if evaluate_achievement(criterion.achievement_id, p, league.indices)
        )
    raise TypeError(f"Unsupported criterion: {criterion!r}")


def resolve_cell(row: GridCriterion, column: GridCriterion, league: League) -> frozenset[int]:
    return criterion_players(row, league) & criterion_players(column, league)
