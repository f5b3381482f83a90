"""Rarity scoring.

Prominence is a continuous career-notability score. Rarity rescales
prominence inside one cell's eligible set: the least prominent correct answer
is the rarest pick (100) and the most prominent is the most common (0).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from .config import (
    ACCOLADE_WEIGHTS,
    MIN_RARITY_RANGE,
    MINUTES_SATURATION,
    PER_BASELINE,
    PROMINENCE_WEIGHTS,
    RARITY_LABELS,
    RELIABILITY_GAMES,
    RELIABILITY_SEASONS,
    SINGLETON_RARITY,
)
from .league import League
from .models import Player


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _mean(values: list[float], default: float = 0.0) -> float:
    return sum(values) / len(values) if values else default


@dataclass(slots=True, frozen=True)
class CareerProfile:
    seasons: int = 0
    games: int = 0
    minutes: float = 0.0
    vorp: float = 0.0
    ows: float = 0.0
    dws: float = 0.0
    per: float = PER_BASELINE
    obpm: float = 0.0
    dbpm: float = 0.0
    pm100: float = 0.0
    on_off100: float = 0.0
    award_counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_player(cls, player: Player) -> CareerProfile:
        rows = [line for line in player.regular_seasons if line.games_played > 0]
        return cls(
            seasons=player.seasons_played,
            games=sum(line.games_played for line in rows),
            minutes=sum(line.minutes for line in rows),
            vorp=sum(line.vorp for line in rows),
            ows=sum(line.ows for line in rows),
            dws=sum(line.dws for line in rows),
            per=_mean([line.per for line in rows if line.per is not None], PER_BASELINE),
            obpm=_mean([line.obpm for line in rows if line.obpm is not None]),
            dbpm=_mean([line.dbpm for line in rows if line.dbpm is not None]),
            pm100=_mean([line.pm100 for line in rows if line.pm100 is not None]),
            on_off100=_mean([line.on_off100 for line in rows if line.on_off100 is not None]),
            award_counts=player.award_counts(),
        )

    @property
    def career_value(self) -> float:
        return 0.6 * max(0.0, self.vorp) + 0.4 * (self.ows + self.dws)


def accolade_score(profile: CareerProfile) -> float:
    return sum(ACCOLADE_WEIGHTS.get(kind, 0.0) * count for kind, count in profile.award_counts.items())


def prominence(profile: CareerProfile) -> float:
    accolades_w, value_w, talent_w, longevity_w = PROMINENCE_WEIGHTS

    minutes_factor = _clamp01(math.log1p(max(0.0, profile.minutes)) / math.log1p(MINUTES_SATURATION))
    career_value = profile.career_value * minutes_factor

    reliability = _clamp01(
        0.6 * profile.games / RELIABILITY_GAMES + 0.4 * profile.seasons / RELIABILITY_SEASONS
    )
    rate_talent = (
        0.5 * max(0.0, profile.per - PER_BASELINE)
        + 0.4 * (profile.obpm + profile.dbpm)
        + 0.1 * (profile.pm100 + profile.on_off100) / 2
    ) * reliability

    longevity = 0.5 * math.log1p(profile.games) + 0.5 * profile.seasons

    return (
        accolades_w * accolade_score(profile)
        + value_w * career_value
        + talent_w * rate_talent
        + longevity_w * longevity
    )


def player_prominence(player: Player) -> float:
    return prominence(CareerProfile.from_player(player))


@dataclass(slots=True, frozen=True)
class CellScore:
    player_id: int
    rarity: int
    rank: int
    eligible_count: int
    prominence: float


@dataclass(slots=True, frozen=True)
class AnswerScore:
    is_correct: bool
    rarity: int = 0
    rank: int | None = None
    eligible_count: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "is_correct": self.is_correct,
            "rarity": self.rarity,
            "rank": self.rank,
            "eligible_count": self.eligible_count,
        }


def _ranked(players: list[Player], profiles: dict[int, CareerProfile], scores: dict[int, float]) -> list[Player]:
    return sorted(
        players,
        key=lambda p: (-profiles[p.player_id].career_value, -scores[p.player_id], p.player_id),
    )


def cell_rarity(players: Iterable[Player]) -> dict[int, CellScore]:
    """Score every player of one cell's eligible set.

    Prominence is rescaled linearly across the set, min to 100 and max to 0,
    and rounded to an int. A lone eligible player scores 50. The range is
    floored so a set of equally prominent players all score 100.
    """
    population = list({p.player_id: p for p in players}.values())
    if not population:
        return {}
    profiles = {p.player_id: CareerProfile.from_player(p) for p in population}
    scores = {pid: prominence(profile) for pid, profile in profiles.items()}
    ranks = {p.player_id: rank for rank, p in enumerate(_ranked(population, profiles, scores), start=1)}
    count = len(population)

    if count == 1:
        only = population[0].player_id
        return {only: CellScore(only, SINGLETON_RARITY, 1, 1, scores[only])}

    low = min(scores.values())
    spread = max(max(scores.values()) - low, MIN_RARITY_RANGE)
    result: dict[int, CellScore] = {}
    for pid, score in scores.items():
        rarity = 100.0 - 100.0 * (score - low) / spread
        result[pid] = CellScore(
            player_id=pid,
            rarity=round_half_up(max(0.0, min(100.0, rarity))),
            rank=ranks[pid],
            eligible_count=count,
            prominence=score,
        )
    return result


def score_answer(eligible: Iterable[int], player_id: int, league: League) -> AnswerScore:
    eligible_ids = frozenset(eligible)
    if player_id not in eligible_ids:
        return AnswerScore(is_correct=False, eligible_count=len(eligible_ids))
    scores = cell_rarity(league.players_for(eligible_ids))
    cell = scores.get(player_id)
    if cell is None:
        # Eligible id with no loaded player record.
        return AnswerScore(is_correct=True, eligible_count=len(eligible_ids))
    return AnswerScore(is_correct=True, rarity=cell.rarity, rank=cell.rank, eligible_count=len(eligible_ids))


def rank_eligible(eligible: Iterable[int], league: League) -> list[Player]:
    """Eligible players, most prominent first by career value."""
    players = league.players_for(set(eligible))
    profiles = {p.player_id: CareerProfile.from_player(p) for p in players}
    scores = {pid: prominence(profile) for pid, profile in profiles.items()}
    return _ranked(players, profiles, scores)


def rarity_label(score: int) -> str:
    for floor, label in RARITY_LABELS:
        if score >= floor:
            return label
    return RARITY_LABELS[-1][1]
