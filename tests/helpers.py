from __future__ import annotations

from itertools import combinations
from typing import Any


def season_row(season: int, team_id: int, *, games: int = 60, playoffs: bool = False, **stats: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "season": season,
        "teamId": team_id,
        "playoffFlag": playoffs,
        "gamesPlayed": games,
        "minutes": games * 30,
    }
    row.update(stats)
    return row


def player_doc(
    pid: int,
    seasons: list[dict[str, Any]],
    *,
    draft: dict[str, Any] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    doc: dict[str, Any] = {"id": pid, "name": f"Player {pid}", "seasons": seasons}
    if draft is not None:
        doc["draft"] = draft
    doc.update(fields)
    return doc


def drafted(round_: int, pick: int, team_id: int = 0) -> dict[str, Any]:
    return {"round": round_, "pick": pick, "teamId": team_id}


def team_docs(count: int) -> list[dict[str, Any]]:
    return [{"id": tid, "name": f"City {tid}", "abbrev": f"C{tid}"} for tid in range(count)]


def league_doc(players: list[dict[str, Any]], teams: list[dict[str, Any]] | None = None, **extra: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {"players": players, "teams": teams if teams is not None else []}
    doc.update(extra)
    return doc


def _box_score(pid: int) -> dict[str, Any]:
    # Strictly increasing in pid so each season has a single leader per category.
    return {
        "points": pid * 10,
        "offensiveRebounds": pid,
        "defensiveRebounds": pid * 3,
        "assists": pid * 2,
        "steals": pid,
        "blocks": pid,
        "vorp": pid / 10,
        "ows": pid / 5,
        "dws": pid / 8,
    }


def pairwise_league_doc(team_count: int = 6, per_pair: int = 2) -> dict[str, Any]:
    """Every pair of teams shares ``per_pair`` journeymen; with 6 teams each roster has 10."""
    players: list[dict[str, Any]] = []
    pid = 1
    for first, second in combinations(range(team_count), 2):
        for _ in range(per_pair):
            if pid % 3 == 0:
                draft = None
            elif pid % 3 == 1:
                draft = drafted(1, pid)
            else:
                draft = drafted(2, pid)
            players.append(
                player_doc(
                    pid,
                    [season_row(season, team, **_box_score(pid)) for season, team in ((2020, first), (2021, second))],
                    draft=draft,
                )
            )
            pid += 1
    return league_doc(players, team_docs(team_count))
