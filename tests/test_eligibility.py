import pytest

from hoops_grid.eligibility import (
    AchievementCriterion,
    TeamCriterion,
    achievement_criterion,
    criterion_players,
    resolve_cell,
    team_criterion,
)
from hoops_grid.league import League
from tests.helpers import drafted, league_doc, player_doc, season_row, team_docs


def _league() -> League:
    return League.from_document(
        league_doc(
            [
                player_doc(1, [season_row(2020, 0), season_row(2021, 1)], draft=drafted(1, 3)),
                player_doc(2, [season_row(2020, 0, games=58), season_row(2020, 2, games=3)], draft=drafted(2, 40)),
                player_doc(3, [season_row(2020, 1)]),
                player_doc(4, [season_row(2020, 2), season_row(2021, 2, games=5, playoffs=True)], draft=drafted(1, 9)),
            ],
            team_docs(3),
        )
    )


@pytest.mark.regression
def test_mid_season_trade_counts_for_both_teams() -> None:
    league = _league()
    assert 2 in criterion_players(team_criterion(league, 0), league)
    assert 2 in criterion_players(team_criterion(league, 2), league)
    assert resolve_cell(team_criterion(league, 0), team_criterion(league, 2), league) == frozenset({2})


def test_team_by_achievement_cell() -> None:
    league = _league()
    cell = resolve_cell(team_criterion(league, 0), achievement_criterion("first_round_pick"), league)
    assert cell == frozenset({1})
    cell = resolve_cell(achievement_criterion("undrafted"), team_criterion(league, 1), league)
    assert cell == frozenset({3})


def test_achievement_by_achievement_cell() -> None:
    league = _league()
    cell = resolve_cell(achievement_criterion("first_round_pick"), achievement_criterion("one_team"), league)
    assert cell == frozenset({4})


def test_team_with_no_players_is_empty() -> None:
    league = _league()
    assert criterion_players(TeamCriterion(team_id=77), league) == frozenset()


def test_unknown_achievement_criterion_is_rejected() -> None:
    with pytest.raises(ValueError):
        achievement_criterion("scored_a_million")


def test_criterion_labels_and_serialization() -> None:
    league = _league()
    team = team_criterion(league, 1)
    feat = achievement_criterion("undrafted")
    assert team.to_dict() == {"type": "team", "value": 1, "label": "City 1"}
    assert feat.to_dict() == {"type": "achievement", "value": "undrafted", "label": "Undrafted Player"}
    assert isinstance(feat, AchievementCriterion)
