"""Closest-to-the-hole and overall-winner payouts."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence, Tuple

from ..config import HOLES_PER_ROUND
from ..exceptions import IncompleteScoresError, InvalidWinnerError
from ..money import ZERO, split_evenly, to_money
from ..schemas import ContestPayouts, CthPayoutDetail, OverallWinnerPayoutDetail, Team
from .validation import missing_scores

logger = logging.getLogger(__name__)


def team_totals(
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    *,
    holes: int = HOLES_PER_ROUND,
) -> dict[str, int]:
    """Return each team's summed strokes over ``holes`` holes."""

    missing = missing_scores(teams, scores, holes=holes)
    if missing:
        raise IncompleteScoresError(missing)
    return {
        team.id: sum(scores[(team.id, hole)] for hole in range(1, holes + 1))
        for team in teams
    }


def determine_overall_winner(
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    override_team_id: Optional[str] = None,
) -> tuple[Team, int, list[str]]:
    """Pick the overall winning team.

    An override always wins. Without one the team with the lowest total
    strokes wins and a tie goes to the team created first in the round.

    Returns:
        ``(winning_team, winning_total, tied_team_ids)`` where
        ``tied_team_ids`` lists every team sharing the lowest total (empty when
        the low total is unique).
    """

    if not teams:
        raise ValueError("at least one team is required")
    totals = team_totals(teams, scores)
    low_total = min(totals.values())
    low_teams = [team.id for team in teams if totals[team.id] == low_total]
    tied = low_teams if len(low_teams) > 1 else []

    if override_team_id is not None:
        team = next((t for t in teams if t.id == override_team_id), None)
        if team is None:
            raise InvalidWinnerError(
                f"overall winner team '{override_team_id}' is not a team in this round"
            )
        return team, totals[team.id], tied

    winner = next(t for t in teams if t.id == low_teams[0])
    if tied:
        logger.info(
            "Overall winner tie at %d strokes between %s; awarding %s",
            low_total,
            tied,
            winner.id,
        )
    return winner, low_total, tied


def calculate_contest_payouts(
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    *,
    cth_winner_golfer_id: str,
    cth_payout: Decimal,
    total_pot: Decimal,
    total_skins_paid: Decimal,
    final_skin_rollover_amount: Decimal = ZERO,
    overall_winner_team_id: Optional[str] = None,
) -> ContestPayouts:
    """Compute the CTH and overall-winner payouts of a round.

    The CTH prize goes to the single golfer who won it. The overall winner
    gets whatever the pot still holds after skins, rollover and CTH, split
    evenly among the team's golfers. A shortfall leaves the overall payout at
    zero; aggregation reports the imbalance.

    Raises:
        InvalidWinnerError: If the CTH golfer does not play in the round or
            the override team is not part of it.
        IncompleteScoresError: If the scorecard has gaps.
    """

    cth_team = next((t for t in teams if cth_winner_golfer_id in t.golfer_ids), None)
    if cth_team is None:
        raise InvalidWinnerError(
            f"CTH winner '{cth_winner_golfer_id}' is not a participant in this round"
        )
    winner, winner_total, tied = determine_overall_winner(
        teams, scores, overall_winner_team_id
    )

    cth_amount = to_money(cth_payout)
    if cth_amount < 0:
        raise ValueError(f"CTH payout cannot be negative (got {cth_amount})")
    if not winner.golfer_ids:
        raise ValueError(f"overall winner team '{winner.id}' has no golfers")
    cth_detail = None
    if cth_amount > 0:
        cth_detail = CthPayoutDetail(
            golfer_id=cth_winner_golfer_id, team_id=cth_team.id, amount=cth_amount
        )

    remaining = to_money(
        to_money(total_pot)
        - to_money(total_skins_paid)
        - cth_amount
        - to_money(final_skin_rollover_amount)
    )
    if remaining < 0:
        logger.warning(
            "Pot %s cannot cover skins %s, CTH %s and rollover %s; overall payout is zero",
            total_pot,
            total_skins_paid,
            cth_amount,
            final_skin_rollover_amount,
        )
        remaining = ZERO

    member_shares = dict(
        zip(winner.golfer_ids, split_evenly(remaining, len(winner.golfer_ids)))
    )

    overall = OverallWinnerPayoutDetail(
        team_id=winner.id,
        amount=remaining,
        member_shares=member_shares,
        total_strokes=winner_total,
        is_override=overall_winner_team_id is not None,
        tied_team_ids=tied,
    )
    return ContestPayouts(cth=cth_detail, overall=overall)
