from __future__ import annotations

from dataclasses import dataclass, field

INDIVIDUAL_AWARD_KINDS = {"mvp", "dpoy", "roy", "smoy", "mip", "finals_mvp"}

# Player award kinds the award index keeps; tiered kinds fold into one key.
AWARD_KIND_GROUPS: dict[str, str] = {
    "mvp": "mvp",
    "dpoy": "dpoy",
    "roy": "roy",
    "smoy": "smoy",
    "mip": "mip",
    "finals_mvp": "finals_mvp",
    "all_league_1": "all_league",
    "all_league_2": "all_league",
    "all_league_3": "all_league",
    "all_defensive_1": "all_defensive",
    "all_defensive_2": "all_defensive",
    "all_defensive_3": "all_defensive",
}


@dataclass(slots=True)
class SeasonLine:
    season: int
    team_id: int
    playoffs: bool = False
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

    @property
    def rebounds(self) -> int:
        return self.offensive_rebounds + self.defensive_rebounds

    def per_game(self, total: float) -> float:
        return total / (self.games_played or 1)

    @property
    def ppg(self) -> float:
        return self.per_game(self.points)

    @property
    def rpg(self) -> float:
        return self.per_game(self.rebounds)

    @property
    def apg(self) -> float:
        return self.per_game(self.assists)

    @property
    def spg(self) -> float:
        return self.per_game(self.steals)

    @property
    def bpg(self) -> float:
        return self.per_game(self.blocks)

    @property
    def fg_pct(self) -> float:
        if self.fg_attempts <= 0:
            return 0.0
        return self.fg_made / self.fg_attempts

    @property
    def three_pct(self) -> float:
        if self.three_attempts <= 0:
            return 0.0
        return self.made_threes / self.three_attempts

    @property
    def ft_pct(self) -> float:
        if self.ft_attempts <= 0:
            return 0.0
        return self.ft_made / self.ft_attempts

    def combined_with(self, other: SeasonLine) -> SeasonLine:
        """Fold another stint of the same season into one line (counting stats only)."""
        return SeasonLine(
            season=self.season,
            team_id=self.team_id,
            playoffs=self.playoffs,
            games_played=self.games_played + other.games_played,
            minutes=self.minutes + other.minutes,
            points=self.points + other.points,
            assists=self.assists + other.assists,
            steals=self.steals + other.steals,
            blocks=self.blocks + other.blocks,
            offensive_rebounds=self.offensive_rebounds + other.offensive_rebounds,
            defensive_rebounds=self.defensive_rebounds + other.defensive_rebounds,
            made_threes=self.made_threes + other.made_threes,
            three_attempts=self.three_attempts + other.three_attempts,
            fg_made=self.fg_made + other.fg_made,
            fg_attempts=self.fg_attempts + other.fg_attempts,
            ft_made=self.ft_made + other.ft_made,
            ft_attempts=self.ft_attempts + other.ft_attempts,
        )


@dataclass(slots=True, frozen=True)
class DraftRecord:
    round: int = 0
    pick: int = 0
    team_id: int | None = None

    @property
    def undrafted(self) -> bool:
        return self.round <= 0 or self.pick <= 0 or self.team_id is None or self.team_id < 0


@dataclass(slots=True, frozen=True)
class AwardRecord:
    kind: str
    season: int


@dataclass(slots=True)
class Player:
    player_id: int
    name: str
    birth_year: int | None = None
    draft: DraftRecord = field(default_factory=DraftRecord)
    hall_of_fame: bool = False
    seasons: list[SeasonLine] = field(default_factory=list)
    awards: list[AwardRecord] = field(default_factory=list)
    achievements: list[str] = field(default_factory=list)

    @property
    def regular_seasons(self) -> list[SeasonLine]:
        return [s for s in self.seasons if not s.playoffs]

    @property
    def team_ids(self) -> set[int]:
        """Every team the player logged a game for, trade stints and playoffs included."""
        return {s.team_id for s in self.seasons if s.games_played > 0}

    @property
    def seasons_played(self) -> int:
        return len({s.season for s in self.regular_seasons if s.games_played > 0})

    def combined_regular_seasons(self) -> list[SeasonLine]:
        """One line per regular season, with mid-season trade stints added together."""
        by_season: dict[int, SeasonLine] = {}
        for line in self.regular_seasons:
            current = by_season.get(line.season)
            by_season[line.season] = line if current is None else current.combined_with(line)
        return [by_season[season] for season in sorted(by_season)]

    def award_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for award in self.awards:
            counts[award.kind] = counts.get(award.kind, 0) + 1
        return counts


@dataclass(slots=True, frozen=True)
class Team:
    team_id: int
    name: str
    abbrev: str = ""

    @property
    def label(self) -> str:
        return self.name or self.abbrev or f"Team {self.team_id}"
