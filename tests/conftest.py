import pytest

from hoops_grid.league import League
from tests.helpers import pairwise_league_doc


@pytest.fixture
def six_team_league() -> League:
    return League.from_document(pairwise_league_doc())
