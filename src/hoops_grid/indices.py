"""Derived lookup indices for one league load.

Every sub-builder is a pure function over the same read-only input, so
``build_indices(..., parallel=True)`` can fan them out over a thread pool and
join the results without any locking. The result is an immutable
:class:`LeagueIndices` value that callers thread through explicitly.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .config import DEFAULT_SEASON_GAMES, LEADER_EPSILON, LEADER_KEYS, QUALIFYING_GAMES_FRACTION
from .document import (
    AllStarRosterDoc,
    HallOfFameEventDoc,
    LeagueDocument,
    PlayoffBracketDoc,
    SeasonAwardsDoc,
    SeasonLengthDoc,
    to_player,
)
from .models import AWARD_KIND_GROUPS, INDIVIDUAL_AWARD_KINDS, Player, SeasonLine

logger = logging.getLogger(__name__)

_EMPTY: frozenset[int] = frozenset()


@dataclass(slots=True, frozen=True)
class CareerTotals:
    pts: int = 0
    trb: int = 0
    ast: int = 0
    stl: int = 0
    blk: int = 0
    tp: int = 0


@dataclass(slots=True, frozen=True)
class FeatLine:
    season: int | None = None
    points: float = 0.0
    offensive_rebounds: float = 0.0
    defensive_rebounds: float = 0.0
    rebounds: float = 0.0
    assists: float = 0.0
    steals: float = 0.0
    blocks: float = 0.0
    threes: float = 0.0
    triple_double: bool = False


@dataclass(slots=True, frozen=True)
class LeagueIndices:
    games_by_season: Mapping[int, int]
    career_totals: Mapping[int, CareerTotals]
    season_leaders: Mapping[int, Mapping[str, frozenset[int]]]
    awards: Mapping[str, frozenset[int]]
    all_stars: Mapping[int, frozenset[int]]
    champions: Mapping[int, int]
    hall_of_famers: frozenset[int]
    hof_team_season: Mapping[str, frozenset[int]]
    feats_by_player: Mapping[int, tuple[FeatLine, ...]]

    def season_games(self, season: int) -> int:
        return self.games_by_season.get(season, DEFAULT_SEASON_GAMES)

    def qualifying_games(self, season: int) -> int:
        return qualifying_games(self.season_games(season))

    def totals_for(self, player_id: int) -> CareerTotals:
        return self.career_totals.get(player_id) or CareerTotals()

    def led_league(self, player_id: int, key: str) -> bool:
        return any(player_id in leaders.get(key, _EMPTY) for leaders in self.season_leaders.values())

    def award_winners(self, kind: str) -> frozenset[int]:
        return self.awards.get(kind, _EMPTY)

    def all_star_seasons(self, player_id: int) -> list[int]:
        return sorted(season for season, roster in self.all_stars.items() if player_id in roster)

    def feats_for(self, player_id: int) -> tuple[FeatLine, ...]:
        return self.feats_by_player.get(player_id, ())


def qualifying_games(season_games: int) -> int:
    return math.ceil(season_games * QUALIFYING_GAMES_FRACTION)


def team_season_key(season: int, team_id: int) -> str:
    return f"{season}:{team_id}"


def build_games_by_season(rows: Iterable[SeasonLengthDoc]) -> dict[int, int]:
    out: dict[int, int] = {}
    for row in rows:
        if row.num_games is not None and row.num_games > 0:
            out[row.season] = row.num_games
    return out


def build_career_totals(players: Iterable[Player]) -> dict[int, CareerTotals]:
    out: dict[int, CareerTotals] = {}
    for player in players:
        pts = trb = ast = stl = blk = tp = 0
        for line in player.regular_seasons:
            pts += line.points
            trb += line.rebounds
            ast += line.assists
            stl += line.steals
            blk += line.blocks
            tp += line.made_threes
        out[player.player_id] = CareerTotals(pts=pts, trb=trb, ast=ast, stl=stl, blk=blk, tp=tp)
    return out


def build_season_leaders(
    players: Iterable[Player],
    games_by_season: Mapping[int, int],
) -> dict[int, dict[str, frozenset[int]]]:
    """Per-game leaders of each regular season, ties included.

    Only players with at least ``ceil(0.58 * season length)`` games are
    considered. Everyone within ``LEADER_EPSILON`` of the qualified maximum is a
    leader, so a shared title produces several ids.
    """
    rows_by_season: dict[int, list[tuple[int, SeasonLine]]] = {}
    for player in players:
        for line in player.combined_regular_seasons():
            rows_by_season.setdefault(line.season, []).append((player.player_id, line))

    leaders: dict[int, dict[str, frozenset[int]]] = {}
    for season, rows in rows_by_season.items():
        min_games = qualifying_games(games_by_season.get(season, DEFAULT_SEASON_GAMES))
        qualified = [(pid, line) for pid, line in rows if line.games_played >= min_games]
        by_key: dict[str, frozenset[int]] = {}
        for key in LEADER_KEYS:
            if not qualified:
                by_key[key] = _EMPTY
                continue
            best = max(getattr(line, key) for _pid, line in qualified)
            by_key[key] = frozenset(
                pid for pid, line in qualified if getattr(line, key) >= best - LEADER_EPSILON
            )
        leaders[season] = by_key
    return leaders


def build_awards(
    season_awards: Iterable[SeasonAwardsDoc],
    players: Iterable[Player],
) -> dict[str, frozenset[int]]:
    buckets: dict[str, set[int]] = {}
    for entry in season_awards:
        for kind in INDIVIDUAL_AWARD_KINDS:
            pid = getattr(entry, kind)
            if pid is not None:
                buckets.setdefault(kind, set()).add(pid)
        for roster in entry.all_league:
            buckets.setdefault("all_league", set()).update(roster)
        for roster in entry.all_defensive:
            buckets.setdefault("all_defensive", set()).update(roster)

    # Structured player award records carry canonical kinds; unknown kinds are ignored.
    for player in players:
        for award in player.awards:
            kind = AWARD_KIND_GROUPS.get(award.kind)
            if kind is not None:
                buckets.setdefault(kind, set()).add(player.player_id)
    return {kind: frozenset(ids) for kind, ids in buckets.items()}


def build_all_stars(rosters: Iterable[AllStarRosterDoc]) -> dict[int, frozenset[int]]:
    out: dict[int, set[int]] = {}
    for roster in rosters:
        out.setdefault(roster.season, set()).update(roster.players)
    return {season: frozenset(ids) for season, ids in out.items()}


def build_champions(brackets: Iterable[PlayoffBracketDoc]) -> dict[int, int]:
    """Champion of each season from the final round of its bracket."""
    out: dict[int, int] = {}
    for bracket in brackets:
        if not bracket.rounds or not bracket.rounds[-1]:
            continue
        final_round = bracket.rounds[-1]
        champion: int | None = None
        for series in final_round:
            if series.home.won >= 4 or series.away.won >= 4:
                champion = series.home.team_id if series.home.won > series.away.won else series.away.team_id
                break
        if champion is None:
            series = final_round[0]
            if series.home.won != series.away.won:
                champion = series.home.team_id if series.home.won > series.away.won else series.away.team_id
        if champion is not None:
            out[bracket.season] = champion
    return out


def build_hall_of_fame(
    events: Iterable[HallOfFameEventDoc],
    players: Iterable[Player],
) -> tuple[frozenset[int], dict[str, frozenset[int]]]:
    player_list = list(players)
    inducted: set[int] = set()
    for event in events:
        inducted.update(event.player_ids)
    inducted.update(p.player_id for p in player_list if p.hall_of_fame)

    by_team_season: dict[str, set[int]] = {}
    for player in player_list:
        if player.player_id not in inducted:
            continue
        for line in player.seasons:
            if line.games_played <= 0:
                continue
            by_team_season.setdefault(team_season_key(line.season, line.team_id), set()).add(player.player_id)
    return frozenset(inducted), {key: frozenset(ids) for key, ids in by_team_season.items()}


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _feat_player_id(raw: Mapping[str, Any]) -> int | None:
    for key in ("pid", "playerId", "playerID", "player_id"):
        pid = _as_int(raw.get(key))
        if pid is not None:
            return pid
    nested = raw.get("player")
    if isinstance(nested, Mapping):
        for key in ("pid", "id"):
            pid = _as_int(nested.get(key))
            if pid is not None:
                return pid
    return None


def _first_number(stats: Mapping[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        value = stats.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def _flag(stats: Mapping[str, Any], keys: tuple[str, ...]) -> bool:
    for key in keys:
        value = stats.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value > 0
    return False


def normalize_feat(raw: Mapping[str, Any]) -> FeatLine:
    stats = raw
    for key in ("stats", "s"):
        nested = raw.get(key)
        if isinstance(nested, Mapping):
            stats = nested
            break

    orb = _first_number(stats, ("orb", "offensiveRebounds"))
    drb = _first_number(stats, ("drb", "defensiveRebounds"))
    if orb is not None or drb is not None:
        rebounds = (orb or 0.0) + (drb or 0.0)
    else:
        rebounds = _first_number(stats, ("trb", "reb", "rebounds")) or 0.0
    season = _as_int(raw.get("season"))
    if season is None:
        season = _as_int(stats.get("season"))
    return FeatLine(
        season=season,
        points=_first_number(stats, ("pts", "points")) or 0.0,
        offensive_rebounds=orb or 0.0,
        defensive_rebounds=drb or 0.0,
        rebounds=rebounds,
        assists=_first_number(stats, ("ast", "assists")) or 0.0,
        steals=_first_number(stats, ("stl", "steals")) or 0.0,
        blocks=_first_number(stats, ("blk", "blocks")) or 0.0,
        threes=_first_number(stats, ("tp", "threes", "madeThrees")) or 0.0,
        triple_double=_flag(stats, ("td", "tripleDouble")) or _flag(raw, ("td", "tripleDouble")),
    )


def build_feats(raw_feats: Iterable[Mapping[str, Any]]) -> dict[int, tuple[FeatLine, ...]]:
    out: dict[int, list[FeatLine]] = {}
    skipped = 0
    for raw in raw_feats:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        pid = _feat_player_id(raw)
        if pid is None:
            skipped += 1
            continue
        out.setdefault(pid, []).append(normalize_feat(raw))
    if skipped:
        logger.debug("build_feats: skipped %d feats without a player id", skipped)
    return {pid: tuple(feats) for pid, feats in out.items()}


def _freeze_leaders(leaders: dict[int, dict[str, frozenset[int]]]) -> Mapping[int, Mapping[str, frozenset[int]]]:
    return MappingProxyType({season: MappingProxyType(keys) for season, keys in leaders.items()})


def build_indices(
    document: LeagueDocument,
    players: list[Player] | None = None,
    *,
    parallel: bool = False,
) -> LeagueIndices:
    if players is None:
        players = [to_player(doc) for doc in document.players]
    games_by_season = build_games_by_season(document.games_by_season)

    jobs = {
        "career_totals": (build_career_totals, (players,)),
        "season_leaders": (build_season_leaders, (players, games_by_season)),
        "awards": (build_awards, (document.awards_by_season, players)),
        "all_stars": (build_all_stars, (document.all_star_rosters_by_season,)),
        "champions": (build_champions, (document.playoff_brackets_by_season,)),
        "hall_of_fame": (build_hall_of_fame, (document.hall_of_fame_events, players)),
        "feats": (build_feats, (document.single_game_feats,)),
    }
    if parallel:
        with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
            futures = {name: pool.submit(fn, *args) for name, (fn, args) in jobs.items()}
            results = {name: future.result() for name, future in futures.items()}
    else:
        results = {name: fn(*args) for name, (fn, args) in jobs.items()}

    hall_of_famers, hof_team_season = results["hall_of_fame"]
    indices = LeagueIndices(
        games_by_season=MappingProxyType(games_by_season),
        career_totals=MappingProxyType(results["career_totals"]),
        season_leaders=_freeze_leaders(results["season_leaders"]),
        awards=MappingProxyType(results["awards"]),
        all_stars=MappingProxyType(results["all_stars"]),
        champions=MappingProxyType(results["champions"]),
        hall_of_famers=hall_of_famers,
        hof_team_season=MappingProxyType(hof_team_season),
        feats_by_player=MappingProxyType(results["feats"]),
    )
    logger.debug(
        "build_indices: players=%d seasons=%d champions=%d hall_of_famers=%d feat_players=%d",
        len(players),
        len(indices.season_leaders),
        len(indices.champions),
        len(indices.hall_of_famers),
        len(indices.feats_by_player),
    )
    return indices
