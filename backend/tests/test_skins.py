from decimal import Decimal

import pytest

from tally.exceptions import IncompleteScoresError
from tally.schemas import Team
from tally.services.skins import evaluate_skins, split_team_winnings

FIVE = Decimal("5.00")


def test_unique_low_score_wins_the_skin(four_teams, make_scorecard) -> None:
    scores = make_scorecard(
        {"t1": [3] * 18, "t2": [4] * 18, "t3": [4] * 18, "t4": [5] * 18}
    )
    result = evaluate_skins(four_teams, scores, FIVE)

    assert all(h.winning_team_id == "t1" for h in result.hole_results)
    assert all(h.skin_value_won == FIVE for h in result.hole_results)
    assert result.team_winnings == {
        "t1": Decimal("90.00"),
        "t2": Decimal("0.00"),
        "t3": Decimal("0.00"),
        "t4": Decimal("0.00"),
    }
    assert result.total_skins_paid == Decimal("90.00")
    assert result.final_rollover_count == 0
    assert result.final_skin_rollover_amount == Decimal("0.00")


def test_tied_holes_roll_over_to_next_outright_winner(four_teams, make_scorecard) -> None:
    strokes = {team.id: [4] * 18 for team in four_teams}
    # holes 1 and 2 tied, hole 3 won by t3
    strokes["t1"][0] = strokes["t2"][0] = 3
    strokes["t3"][1] = strokes["t4"][1] = 3
    strokes["t3"][2] = 2
    # remaining holes won by t2
    for hole in range(3, 18):
        strokes["t2"][hole] = 3
    result = evaluate_skins(four_teams, make_scorecard(strokes), FIVE)

    first, second, third = result.hole_results[:3]
    assert not first.is_skin_winner
    assert first.tied_team_ids == ["t1", "t2"]
    assert first.rollover_count == 0
    assert second.tied_team_ids == ["t3", "t4"]
    assert second.rollover_count == 1
    assert third.winning_team_id == "t3"
    assert third.rollover_count == 2
    assert third.is_carry_over_win
    assert third.skin_value_won == Decimal("15.00")

    assert result.hole_results[3].rollover_count == 0
    assert not result.hole_results[3].is_carry_over_win
    assert result.team_winnings["t3"] == Decimal("15.00")
    assert result.team_winnings["t2"] == Decimal("75.00")
    assert result.total_skins_paid == Decimal("90.00")


def test_tie_on_last_hole_leaves_rollover(three_teams, make_scorecard) -> None:
    strokes = {"A": [3] * 18, "B": [4] * 18, "C": [4] * 18}
    strokes["A"][17] = 5
    strokes["B"][17] = strokes["C"][17] = 3
    result = evaluate_skins(three_teams, make_scorecard(strokes), Decimal("10"))

    assert result.team_winnings["A"] == Decimal("170.00")
    assert result.total_skins_paid == Decimal("170.00")
    assert result.final_rollover_count == 1
    assert result.final_skin_rollover_amount == Decimal("10.00")
    assert result.hole_results[-1].tied_team_ids == ["B", "C"]


def test_all_holes_tied_pays_no_skins(four_teams, make_scorecard) -> None:
    scores = make_scorecard({team.id: [4] * 18 for team in four_teams})
    result = evaluate_skins(four_teams, scores, FIVE)

    assert result.total_skins_paid == Decimal("0.00")
    assert result.final_rollover_count == 18
    assert result.final_skin_rollover_amount == Decimal("90.00")


def test_missing_score_is_reported(three_teams, make_scorecard) -> None:
    scores = make_scorecard({"A": [4] * 18, "B": [4] * 18, "C": [4] * 18})
    del scores[("A", 12)]
    with pytest.raises(IncompleteScoresError) as exc:
        evaluate_skins(three_teams, scores, FIVE)
    assert exc.value.missing == [("A", 12)]
    assert exc.value.status_code == 409
    assert "team 'A' hole 12" in exc.value.detail


def test_evaluation_is_repeatable(four_teams, make_scorecard) -> None:
    strokes = {team.id: [4, 5, 3] * 6 for team in four_teams}
    strokes["t4"][5] = 2
    scores = make_scorecard(strokes)
    assert evaluate_skins(four_teams, scores, FIVE) == evaluate_skins(
        four_teams, scores, FIVE
    )


def test_requires_teams() -> None:
    with pytest.raises(ValueError):
        evaluate_skins([], {}, FIVE)


def test_split_team_winnings_gives_extra_cent_to_first_golfer(three_teams) -> None:
    shares = split_team_winnings(
        three_teams, {"A": Decimal("10.00"), "B": Decimal("5.00")}
    )
    assert shares == {
        "a1": Decimal("3.34"),
        "a2": Decimal("3.33"),
        "a3": Decimal("3.33"),
        "b1": Decimal("2.50"),
        "b2": Decimal("2.50"),
        "c1": Decimal("0.00"),
        "c2": Decimal("0.00"),
    }


@pytest.mark.parametrize("value", [Decimal("0"), Decimal("-5")])
def test_skin_value_must_be_positive(four_teams, make_scorecard, value) -> None:
    scores = make_scorecard({team.id: [4] * 18 for team in four_teams})
    with pytest.raises(ValueError, match="must be positive"):
        evaluate_skins(four_teams, scores, value)


def test_split_team_winnings_rejects_team_without_golfers() -> None:
    teams = [Team(id="ghost", name="Ghosts", golfer_ids=[])]
    with pytest.raises(ValueError, match="'ghost' has no golfers"):
        split_team_winnings(teams, {"ghost": Decimal("10.00")})
