from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .achievements import ACHIEVEMENTS, evaluate_achievement
from .document import LeagueDocument, load_league_document, to_player, to_team
from .indices import LeagueIndices, build_indices
from .models import Player, Team

logger = logging.getLogger(__name__)


class League:
    """One loaded league: players, teams and the indices derived from them.

    A League is built once per document load and passed by reference to the
    resolver, generator, scorer and sessions. Nothing here is global.
    """

    def __init__(self, players: Iterable[Player], teams: Iterable[Team], indices: LeagueIndices) -> None:
        self.players: list[Player] = list(players)
        self.indices = indices
        self._players_by_id: dict[int, Player] = {p.player_id: p for p in self.players}

        roster_ids: dict[int, set[int]] = {}
        for player in self.players:
            for team_id in player.team_ids:
                roster_ids.setdefault(team_id, set()).add(player.player_id)
        self._team_players: Mapping[int, frozenset[int]] = MappingProxyType(
            {team_id: frozenset(ids) for team_id, ids in roster_ids.items()}
        )

        team_list = list(teams)
        if not team_list:
            team_list = self._derive_teams()
        self.teams: list[Team] = team_list
        self._teams_by_id: dict[int, Team] = {t.team_id: t for t in team_list}

    @classmethod
    def from_document(
        cls,
        raw: Mapping[str, Any] | LeagueDocument,
        *,
        parallel: bool = False,
        label_achievements: bool = True,
    ) -> League:
        document = load_league_document(raw)
        players = [to_player(doc) for doc in document.players]
        indices = build_indices(document, players, parallel=parallel)
        league = cls(players, [to_team(doc) for doc in document.teams], indices)
        if label_achievements:
            league.label_achievements()
        logger.info("Loaded league: %d players, %d teams", len(league.players), len(league.teams))
        return league

    def _derive_teams(self) -> list[Team]:
        return [Team(team_id=tid, name=f"Team {tid}") for tid in sorted(self._team_players) if tid >= 0]

    def label_achievements(self) -> None:
        """Append every satisfied achievement id to each player's label list."""
        for player in self.players:
            earned = [aid for aid in ACHIEVEMENTS if evaluate_achievement(aid, player, self.indices)]
            player.achievements.extend(aid for aid in earned if aid not in player.achievements)

    def get_player(self, player_id: int) -> Player | None:
        return self._players_by_id.get(player_id)

    def get_team(self, team_id: int) -> Team | None:
        return self._teams_by_id.get(team_id)

    def team_label(self, team_id: int) -> str:
        team = self.get_team(team_id)
        return team.label if team is not None else f"Team {team_id}"

    def team_player_ids(self, team_id: int) -> frozenset[int]:
        return self._team_players.get(team_id, frozenset())

    def players_for(self, player_ids: Iterable[int]) -> list[Player]:
        return [self._players_by_id[pid] for pid in player_ids if pid in self._players_by_id]


def load_league(raw: Mapping[str, Any] | LeagueDocument, *, parallel: bool = False) -> League:
    return League.from_document(raw, parallel=parallel)
