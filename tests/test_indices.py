import pytest

from hoops_grid.document import load_league_document, to_player
from hoops_grid.indices import build_indices, normalize_feat, qualifying_games, team_season_key
from tests.helpers import league_doc, player_doc, season_row


def _indices(raw, parallel: bool = False):
    document = load_league_document(raw)
    return build_indices(document, [to_player(doc) for doc in document.players], parallel=parallel)


def test_qualifying_games_rounds_up() -> None:
    assert qualifying_games(82) == 48
    assert qualifying_games(50) == 29
    assert qualifying_games(66) == 39


def test_career_totals_exclude_playoffs() -> None:
    raw = league_doc(
        [
            player_doc(
                1,
                [
                    season_row(2020, 1, points=1500, madeThrees=100, offensiveRebounds=50, defensiveRebounds=250),
                    season_row(2020, 1, games=10, playoffs=True, points=300, madeThrees=20),
                ],
            )
        ]
    )
    totals = _indices(raw).totals_for(1)
    assert totals.pts == 1500
    assert totals.tp == 100
    assert totals.trb == 300


def test_unknown_player_has_zero_totals() -> None:
    ix = _indices(league_doc([]))
    assert ix.totals_for(99).pts == 0


def test_leaders_require_qualification_and_include_ties() -> None:
    raw = league_doc(
        [
            # 40 ppg in 47 games does not qualify in an 82-game season.
            player_doc(1, [season_row(2020, 1, games=47, points=47 * 40)]),
            player_doc(2, [season_row(2020, 1, games=60, points=60 * 25)]),
            player_doc(3, [season_row(2020, 2, games=50, points=50 * 25)]),
            player_doc(4, [season_row(2020, 2, games=70, points=70 * 20)]),
        ]
    )
    ix = _indices(raw)
    assert ix.season_leaders[2020]["ppg"] == frozenset({2, 3})
    assert ix.led_league(2, "ppg")
    assert not ix.led_league(1, "ppg")
    assert not ix.led_league(4, "ppg")


def test_leader_ties_tolerate_float_noise() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2020, 1, games=60, points=60)]),
            # 1 + 1e-10 ppg: not equal to 1.0, but inside the leader tolerance.
            player_doc(2, [season_row(2020, 1, games=10**10, points=10**10 + 1)]),
            player_doc(3, [season_row(2020, 2, games=10**6, points=10**6 - 1)]),
        ]
    )
    ix = _indices(raw)
    assert ix.season_leaders[2020]["ppg"] == frozenset({1, 2})


def test_season_length_override_changes_qualification() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2012, 1, games=40, points=40 * 30)]),
            player_doc(2, [season_row(2012, 1, games=66, points=66 * 20)]),
        ],
        gamesBySeason=[{"season": 2012, "numGames": 66}],
    )
    ix = _indices(raw)
    assert ix.season_games(2012) == 66
    assert ix.season_games(2013) == 82
    assert ix.season_leaders[2012]["ppg"] == frozenset({1})


@pytest.mark.regression
def test_traded_stints_combine_for_qualification() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2020, 1, games=30, points=30 * 28), season_row(2020, 2, games=30, points=30 * 28)]),
            player_doc(2, [season_row(2020, 3, games=60, points=60 * 20)]),
        ]
    )
    assert _indices(raw).season_leaders[2020]["ppg"] == frozenset({1})


def test_no_qualified_players_means_no_leaders() -> None:
    raw = league_doc([player_doc(1, [season_row(2020, 1, games=10, points=500)])])
    assert _indices(raw).season_leaders[2020]["ppg"] == frozenset()


def _series(home: int, home_won: int, away: int, away_won: int) -> dict:
    return {"home": {"teamId": home, "won": home_won}, "away": {"teamId": away, "won": away_won}}


def test_champion_comes_from_final_round() -> None:
    raw = league_doc(
        [],
        playoffBracketsBySeason=[
            {"season": 2020, "rounds": [[_series(1, 4, 2, 1), _series(3, 2, 4, 4)], [_series(1, 3, 4, 4)]]},
            {"season": 2021, "rounds": [[_series(5, 2, 6, 1)]]},
            {"season": 2022, "rounds": [[_series(7, 2, 8, 2)]]},
            {"season": 2023, "rounds": []},
        ],
    )
    champions = _indices(raw).champions
    assert champions[2020] == 4
    assert champions[2021] == 5
    assert 2022 not in champions
    assert 2023 not in champions


def test_awards_merge_season_table_and_player_records() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2020, 1)], awards=[{"kind": "all_league_2", "season": 2020}]),
            player_doc(2, [season_row(2020, 1)], awards=[{"kind": "dpoy", "season": 2020}]),
            player_doc(3, [season_row(2020, 1)], awards=[{"kind": "Most Valuable Player", "season": 2020}]),
        ],
        awardsBySeason=[{"season": 2020, "mvp": 5, "finalsMvp": 6, "allDefensive": [[7, 8], [9]]}],
    )
    ix = _indices(raw)
    assert ix.award_winners("mvp") == frozenset({5})
    assert ix.award_winners("finals_mvp") == frozenset({6})
    assert ix.award_winners("dpoy") == frozenset({2})
    assert ix.award_winners("all_league") == frozenset({1})
    assert ix.award_winners("all_defensive") == frozenset({7, 8, 9})
    assert ix.award_winners("roy") == frozenset()


@pytest.mark.regression
def test_award_index_keeps_only_player_award_kinds() -> None:
    raw = league_doc(
        [
            player_doc(
                1,
                [season_row(2020, 1)],
                awards=[
                    {"kind": "all_star", "season": 2020},
                    {"kind": "champion", "season": 2020},
                    {"kind": "all_star_mvp", "season": 2020},
                    {"kind": "smoy", "season": 2020},
                ],
            )
        ]
    )
    ix = _indices(raw)
    assert set(ix.awards) == {"smoy"}
    assert ix.award_winners("all_star") == frozenset()


def test_hall_of_fame_team_seasons() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2020, 1), season_row(2021, 2, games=0)], hallOfFame=True),
            player_doc(2, [season_row(2020, 1)]),
            player_doc(3, [season_row(2020, 3)]),
        ],
        hallOfFameEvents=[{"season": 2030, "playerIds": [3]}],
    )
    ix = _indices(raw)
    assert ix.hall_of_famers == frozenset({1, 3})
    assert ix.hof_team_season[team_season_key(2020, 1)] == frozenset({1})
    assert ix.hof_team_season[team_season_key(2020, 3)] == frozenset({3})
    assert team_season_key(2021, 2) not in ix.hof_team_season


def test_all_star_rosters_by_season() -> None:
    raw = league_doc(
        [],
        allStarRostersBySeason=[
            {"season": 2020, "players": [1, 2]},
            {"season": 2021, "players": [2]},
        ],
    )
    ix = _indices(raw)
    assert ix.all_star_seasons(2) == [2020, 2021]
    assert ix.all_star_seasons(1) == [2020]


def test_feat_records_accept_alias_shapes() -> None:
    raw = league_doc(
        [],
        singleGameFeats=[
            {"pid": 1, "season": 2020, "stats": {"pts": 52, "ast": 4}},
            {"player": {"id": 2}, "s": {"orb": 6, "drb": 15}},
            {"playerId": 3, "points": 12, "rebounds": 11, "assists": 10},
            {"stats": {"pts": 80}},
        ],
    )
    ix = _indices(raw)
    assert ix.feats_for(1)[0].points == 52
    assert ix.feats_for(1)[0].season == 2020
    assert ix.feats_for(2)[0].rebounds == 21
    assert ix.feats_for(3)[0].assists == 10
    assert sum(len(feats) for feats in ix.feats_by_player.values()) == 3


@pytest.mark.regression
def test_feat_triple_double_flag() -> None:
    assert normalize_feat({"pid": 1, "td": 1}).triple_double
    assert normalize_feat({"pid": 1, "td": True}).triple_double
    assert normalize_feat({"pid": 1, "tripleDouble": True}).triple_double
    assert normalize_feat({"pid": 1, "stats": {"tripleDouble": 2}}).triple_double
    assert normalize_feat({"pid": 1, "td": True, "stats": {"pts": 12}}).triple_double
    assert not normalize_feat({"pid": 1, "td": 0}).triple_double
    assert not normalize_feat({"pid": 1, "td": False}).triple_double
    assert not normalize_feat({"pid": 1, "tripleDouble": False}).triple_double
    assert not normalize_feat({"pid": 1, "pts": 30}).triple_double


def test_parallel_build_matches_sequential() -> None:
    raw = league_doc(
        [
            player_doc(1, [season_row(2020, 1, points=1200), season_row(2021, 2, points=900)], hallOfFame=True),
            player_doc(2, [season_row(2020, 1, points=1500, assists=600)]),
        ],
        awardsBySeason=[{"season": 2020, "mvp": 2}],
        allStarRostersBySeason=[{"season": 2020, "players": [1, 2]}],
        playoffBracketsBySeason=[{"season": 2020, "rounds": [[_series(1, 4, 2, 0)]]}],
        singleGameFeats=[{"pid": 2, "pts": 55}],
    )
    sequential = _indices(raw)
    parallel = _indices(raw, parallel=True)
    assert dict(parallel.career_totals) == dict(sequential.career_totals)
    assert {s: dict(v) for s, v in parallel.season_leaders.items()} == {
        s: dict(v) for s, v in sequential.season_leaders.items()
    }
    assert dict(parallel.awards) == dict(sequential.awards)
    assert dict(parallel.all_stars) == dict(sequential.all_stars)
    assert dict(parallel.champions) == dict(sequential.champions)
    assert parallel.hall_of_famers == sequential.hall_of_famers
    assert dict(parallel.feats_by_player) == dict(sequential.feats_by_player)


def test_indices_are_read_only() -> None:
    ix = _indices(league_doc([player_doc(1, [season_row(2020, 1)])]))
    with pytest.raises(TypeError):
        ix.career_totals[2] = ix.totals_for(1)
