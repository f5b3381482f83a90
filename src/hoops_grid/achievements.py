"""Achievement registry.

Each achievement is a named predicate over a player's structured record and
the league indices. No predicate looks at free-text award labels: label text
drifts between export sources and silently produces false matches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import (
    ALL_STAR_VETERAN_AGE,
    CAREER_THRESHOLDS,
    FEAT_ASSISTS,
    FEAT_POINTS,
    FEAT_REBOUNDS,
    FEAT_THREES,
    LEADER_EPSILON,
    LONG_CAREER_SEASONS,
    SEASON_RATE_THRESHOLDS,
    SHOOTING_MIN_FGA,
    SHOOTING_MIN_FTA,
    SHOOTING_MIN_TPA,
    SHOOTING_SPLITS,
    TRIPLE_DOUBLE_FLOOR,
)
from .indices import FeatLine, LeagueIndices, team_season_key
from .models import Player, SeasonLine

logger = logging.getLogger(__name__)

Predicate = Callable[[Player, LeagueIndices], bool]


@dataclass(slots=True, frozen=True)
class Achievement:
    achievement_id: str
    label: str
    category: str
    predicate: Predicate


def _career_total(stat: str) -> Predicate:
    threshold = CAREER_THRESHOLDS[stat]

    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return getattr(ix.totals_for(player.player_id), stat) >= threshold

    return predicate


def _qualified_seasons(player: Player, ix: LeagueIndices) -> list[SeasonLine]:
    return [
        line
        for line in player.combined_regular_seasons()
        if line.games_played >= ix.qualifying_games(line.season)
    ]


def _season_rate(key: str) -> Predicate:
    threshold = SEASON_RATE_THRESHOLDS[key]

    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return any(getattr(line, key) >= threshold - LEADER_EPSILON for line in _qualified_seasons(player, ix))

    return predicate


def _shooting_season(player: Player, ix: LeagueIndices) -> bool:
    fg_floor, three_floor, ft_floor = SHOOTING_SPLITS
    for line in _qualified_seasons(player, ix):
        if (
            line.fg_attempts < SHOOTING_MIN_FGA
            or line.three_attempts < SHOOTING_MIN_TPA
            or line.ft_attempts < SHOOTING_MIN_FTA
        ):
            continue
        if (
            line.fg_pct >= fg_floor - LEADER_EPSILON
            and line.three_pct >= three_floor - LEADER_EPSILON
            and line.ft_pct >= ft_floor - LEADER_EPSILON
        ):
            return True
    return False


def _led_league(key: str) -> Predicate:
    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return ix.led_league(player.player_id, key)

    return predicate


def _feat(test: Callable[[FeatLine], bool]) -> Predicate:
    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return any(test(feat) for feat in ix.feats_for(player.player_id))

    return predicate


def is_triple_double(feat: FeatLine) -> bool:
    if feat.triple_double:
        return True
    lines = (feat.points, feat.rebounds, feat.assists, feat.steals, feat.blocks)
    return sum(1 for value in lines if value >= TRIPLE_DOUBLE_FLOOR) >= 3


def _award(kind: str) -> Predicate:
    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return player.player_id in ix.award_winners(kind)

    return predicate


def _all_star(player: Player, ix: LeagueIndices) -> bool:
    return any(player.player_id in roster for roster in ix.all_stars.values())


def _veteran_all_star(player: Player, ix: LeagueIndices) -> bool:
    if player.birth_year is None:
        return False
    return any(season - player.birth_year >= ALL_STAR_VETERAN_AGE for season in ix.all_star_seasons(player.player_id))


def _champion(player: Player, ix: LeagueIndices) -> bool:
    return any(
        line.games_played > 0 and ix.champions.get(line.season) == line.team_id
        for line in player.seasons
    )


def _teammate_of_greats(player: Player, ix: LeagueIndices) -> bool:
    for line in player.seasons:
        if line.games_played <= 0:
            continue
        greats = ix.hof_team_season.get(team_season_key(line.season, line.team_id))
        if greats and any(pid != player.player_id for pid in greats):
            return True
    return False


def _hall_of_fame(player: Player, ix: LeagueIndices) -> bool:
    return player.player_id in ix.hall_of_famers


def _long_career(player: Player, ix: LeagueIndices) -> bool:
    return player.seasons_played >= LONG_CAREER_SEASONS


def _first_overall(player: Player, ix: LeagueIndices) -> bool:
    draft = player.draft
    return not draft.undrafted and draft.round == 1 and draft.pick == 1


def _drafted_in_round(draft_round: int) -> Predicate:
    def predicate(player: Player, ix: LeagueIndices) -> bool:
        return not player.draft.undrafted and player.draft.round == draft_round

    return predicate


def _undrafted(player: Player, ix: LeagueIndices) -> bool:
    return player.draft.undrafted


def _one_team(player: Player, ix: LeagueIndices) -> bool:
    return len(player.team_ids) == 1


_REGISTRY: tuple[tuple[str, str, str, Predicate], ...] = (
    ("career_points", "20,000+ Career Points", "career", _career_total("pts")),
    ("career_rebounds", "10,000+ Career Rebounds", "career", _career_total("trb")),
    ("career_assists", "5,000+ Career Assists", "career", _career_total("ast")),
    ("career_steals", "2,000+ Career Steals", "career", _career_total("stl")),
    ("career_blocks", "1,500+ Career Blocks", "career", _career_total("blk")),
    ("career_threes", "2,000+ Made Threes", "career", _career_total("tp")),
    ("season_30_ppg", "Averaged 30+ PPG in a Season", "season", _season_rate("ppg")),
    ("season_10_apg", "Averaged 10+ APG in a Season", "season", _season_rate("apg")),
    ("season_15_rpg", "Averaged 15+ RPG in a Season", "season", _season_rate("rpg")),
    ("season_3_bpg", "Averaged 3+ BPG in a Season", "season", _season_rate("bpg")),
    ("season_2_5_spg", "Averaged 2.5+ SPG in a Season", "season", _season_rate("spg")),
    ("season_50_40_90", "Shot 50/40/90 in a Season", "season", _shooting_season),
    ("led_scoring", "Led League in Scoring", "leader", _led_league("ppg")),
    ("led_rebounds", "Led League in Rebounds", "leader", _led_league("rpg")),
    ("led_assists", "Led League in Assists", "leader", _led_league("apg")),
    ("led_steals", "Led League in Steals", "leader", _led_league("spg")),
    ("led_blocks", "Led League in Blocks", "leader", _led_league("bpg")),
    ("game_50_points", "Scored 50+ in a Game", "feat", _feat(lambda f: f.points >= FEAT_POINTS)),
    ("game_triple_double", "Triple-Double in a Game", "feat", _feat(is_triple_double)),
    ("game_20_rebounds", "20+ Rebounds in a Game", "feat", _feat(lambda f: f.rebounds >= FEAT_REBOUNDS)),
    ("game_20_assists", "20+ Assists in a Game", "feat", _feat(lambda f: f.assists >= FEAT_ASSISTS)),
    ("game_10_threes", "10+ Threes in a Game", "feat", _feat(lambda f: f.threes >= FEAT_THREES)),
    ("mvp", "MVP Winner", "award", _award("mvp")),
    ("dpoy", "Defensive Player of the Year", "award", _award("dpoy")),
    ("roy", "Rookie of the Year", "award", _award("roy")),
    ("smoy", "Sixth Man of the Year", "award", _award("smoy")),
    ("mip", "Most Improved Player", "award", _award("mip")),
    ("finals_mvp", "Finals MVP", "award", _award("finals_mvp")),
    ("all_league", "All-League Team", "team_honor", _award("all_league")),
    ("all_defensive", "All-Defensive Team", "team_honor", _award("all_defensive")),
    ("all_star", "All-Star Selection", "special", _all_star),
    ("all_star_35_plus", "Made All-Star Team at Age 35+", "special", _veteran_all_star),
    ("champion", "Champion", "special", _champion),
    ("teammate_of_greats", "Teammate of All-Time Greats", "special", _teammate_of_greats),
    ("hall_of_fame", "Hall of Fame", "special", _hall_of_fame),
    ("played_15_seasons", "Played 15+ Seasons", "career_length", _long_career),
    ("first_overall_pick", "#1 Overall Draft Pick", "draft", _first_overall),
    ("first_round_pick", "First Round Pick", "draft", _drafted_in_round(1)),
    ("second_round_pick", "2nd Round Pick", "draft", _drafted_in_round(2)),
    ("undrafted", "Undrafted Player", "draft", _undrafted),
    ("one_team", "Only One Team", "roster", _one_team),
)

ACHIEVEMENTS: dict[str, Achievement] = {
    aid: Achievement(achievement_id=aid, label=label, category=category, predicate=predicate)
    for aid, label, category, predicate in _REGISTRY
}


def achievement_label(achievement_id: str) -> str:
    achievement = ACHIEVEMENTS.get(achievement_id)
    return achievement.label if achievement is not None else achievement_id


def evaluate_achievement(achievement_id: str, player: Player, indices: LeagueIndices) -> bool:
    """Total predicate evaluation: unknown ids and internal faults read as False."""
    achievement = ACHIEVEMENTS.get(achievement_id)
    if achievement is None:
        return False
    try:
        return bool(achievement.predicate(player, indices))
    except Exception:
        logger.warning(
            "Achievement %s failed for player %s; treating as not satisfied",
            achievement_id,
            player.player_id,
            exc_info=True,
        )
        return False


def achievement_counts(players: list[Player], indices: LeagueIndices) -> dict[str, int]:
    return {
        aid: sum(1 for player in players if evaluate_achievement(aid, player, indices))
        for aid in ACHIEVEMENTS
    }
