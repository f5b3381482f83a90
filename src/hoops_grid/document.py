"""Canonical league document schema.

The external normalizer hands the core one in-memory mapping per league load.
This module validates that mapping with pydantic and turns it into the domain
dataclasses in :mod:`hoops_grid.models`. Missing numeric fields on a season row
read as zero, a missing ``players`` array is fatal.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .errors import MalformedLeagueError
from .models import AwardRecord, DraftRecord, Player, SeasonLine, Team


class _DocModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SeasonRowDoc(_DocModel):
    season: int
    team_id: int = -1
    playoff_flag: bool = False
    games_played: int = 0
    minutes: float = 0.0
    points: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    offensive_rebounds: int = 0
    defensive_rebounds: int = 0
    made_threes: int = 0
    three_attempts: int = 0
    fg_made: int = 0
    fg_attempts: int = 0
    ft_made: int = 0
    ft_attempts: int = 0
    vorp: float = 0.0
    ows: float = 0.0
    dws: float = 0.0
    per: float | None = None
    obpm: float | None = None
    dbpm: float | None = None
    pm100: float | None = None
    on_off100: float | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.default
        return value


class DraftDoc(_DocModel):
    round: int | None = None
    pick: int | None = None
    team_id: int | None = None


class AwardDoc(_DocModel):
    kind: str
    season: int


class PlayerDoc(_DocModel):
    id: int
    name: str = ""
    birth_year: int | None = None
    draft: DraftDoc | None = None
    hall_of_fame: bool = False
    seasons: list[SeasonRowDoc] = []
    awards: list[AwardDoc] = []


class TeamDoc(_DocModel):
    id: int
    name: str = ""
    abbrev: str = ""


class SeasonLengthDoc(_DocModel):
    season: int
    num_games: int | None = None


class SeasonAwardsDoc(_DocModel):
    season: int
    mvp: int | None = None
    dpoy: int | None = None
    roy: int | None = None
    smoy: int | None = None
    mip: int | None = None
    finals_mvp: int | None = None
    all_league: list[list[int]] = []
    all_defensive: list[list[int]] = []


class AllStarRosterDoc(_DocModel):
    season: int
    players: list[int] = []


class SeriesSideDoc(_DocModel):
    team_id: int
    won: int = 0


class SeriesDoc(_DocModel):
    home: SeriesSideDoc
    away: SeriesSideDoc


class PlayoffBracketDoc(_DocModel):
    season: int
    rounds: list[list[SeriesDoc]] = []


class HallOfFameEventDoc(_DocModel):
    season: int | None = None
    player_ids: list[int] = []


class LeagueDocument(_DocModel):
    players: list[PlayerDoc]
    teams: list[TeamDoc] = []
    games_by_season: list[SeasonLengthDoc] = []
    awards_by_season: list[SeasonAwardsDoc] = []
    all_star_rosters_by_season: list[AllStarRosterDoc] = []
    playoff_brackets_by_season: list[PlayoffBracketDoc] = []
    hall_of_fame_events: list[HallOfFameEventDoc] = []
    single_game_feats: list[dict[str, Any]] = []


def load_league_document(raw: Mapping[str, Any] | LeagueDocument) -> LeagueDocument:
    if isinstance(raw, LeagueDocument):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedLeagueError("League document must be a mapping.")
    if not isinstance(raw.get("players"), list):
        raise MalformedLeagueError("League document has no players array.")
    try:
        return LeagueDocument.model_validate(raw)
    except ValidationError as exc:
        raise MalformedLeagueError(f"League document is malformed: {exc}") from exc


def _season_line(row: SeasonRowDoc) -> SeasonLine:
    return SeasonLine(
        season=row.season,
        team_id=row.team_id,
        playoffs=row.playoff_flag,
        games_played=row.games_played,
        minutes=row.minutes,
        points=row.points,
        assists=row.assists,
        steals=row.steals,
        blocks=row.blocks,
        offensive_rebounds=row.offensive_rebounds,
        defensive_rebounds=row.defensive_rebounds,
        made_threes=row.made_threes,
        three_attempts=row.three_attempts,
        fg_made=row.fg_made,
        fg_attempts=row.fg_attempts,
        ft_made=row.ft_made,
        ft_attempts=row.ft_attempts,
        vorp=row.vorp,
        ows=row.ows,
        dws=row.dws,
        per=row.per,
        obpm=row.obpm,
        dbpm=row.dbpm,
        pm100=row.pm100,
        on_off100=row.on_off100,
    )


def to_player(doc: PlayerDoc) -> Player:
    draft = doc.draft or DraftDoc()
    return Player(
        player_id=doc.id,
        name=doc.name or f"Player {doc.id}",
        birth_year=doc.birth_year,
        draft=DraftRecord(round=draft.round or 0, pick=draft.pick or 0, team_id=draft.team_id),
        hall_of_fame=doc.hall_of_fame,
        seasons=[_season_line(row) for row in doc.seasons],
        awards=[AwardRecord(kind=a.kind, season=a.season) for a in doc.awards],
    )


def to_team(doc: TeamDoc) -> Team:
    return Team(team_id=doc.id, name=doc.name, abbrev=doc.abbrev)
