import os
import sys
from decimal import Decimal

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tally.schemas import RoundFinancials, Team  # noqa: E402

HOLES = 18


def build_scorecard(strokes_by_team):
    """Expand ``{team_id: [18 scores]}`` into a ``(team, hole) -> score`` map."""

    scorecard = {}
    for team_id, strokes in strokes_by_team.items():
        assert len(strokes) == HOLES, f"{team_id} needs {HOLES} scores"
        for hole, score in enumerate(strokes, start=1):
            scorecard[(team_id, hole)] = score
    return scorecard


@pytest.fixture
def make_scorecard():
    return build_scorecard


@pytest.fixture
def four_teams():
    """Eight golfers in four two-player teams, listed in creation order."""

    return [
        Team(id="t1", name="Team 1", golfer_ids=["g1", "g2"]),
        Team(id="t2", name="Team 2", golfer_ids=["g3", "g4"]),
        Team(id="t3", name="Team 3", golfer_ids=["g5", "g6"]),
        Team(id="t4", name="Team 4", golfer_ids=["g7", "g8"]),
    ]


@pytest.fixture
def three_teams():
    """Seven golfers: one three-player team and two pairs."""

    return [
        Team(id="A", name="Alpha", golfer_ids=["a1", "a2", "a3"]),
        Team(id="B", name="Bravo", golfer_ids=["b1", "b2"]),
        Team(id="C", name="Charlie", golfer_ids=["c1", "c2"]),
    ]


@pytest.fixture
def eight_player_financials():
    """$20 buy-in, eight golfers, $5 skins and a $20 CTH prize."""

    return RoundFinancials(
        num_players=8,
        buy_in_amount=Decimal("20"),
        total_pot=Decimal("160"),
        skin_value_per_hole=Decimal("5"),
        cth_payout=Decimal("20"),
    )
