"""Per-golfer payout aggregation and pot verification."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence, Tuple

from ..config import PAYOUT_TOLERANCE
from ..exceptions import IncompleteScoresError, InvalidWinnerError
from ..money import ZERO, format_money, to_money, total
from ..schemas import (
    ContestPayouts,
    PayoutBreakdown,
    PayoutReport,
    PayoutVerification,
    PlayerPayoutSummary,
    RoundFinancials,
    RoundPayoutResult,
    SkinsResult,
    Team,
)
from .contests import calculate_contest_payouts
from .skins import evaluate_skins, split_team_winnings
from .validation import missing_scores

logger = logging.getLogger(__name__)


def _verification_message(
    *,
    total_pot: Decimal,
    skins: Decimal,
    cth: Decimal,
    overall: Decimal,
    rollover: Decimal,
    discrepancy: Decimal,
    is_balanced: bool,
) -> str:
    distributed = skins + cth + overall + rollover
    message = (
        f"Verification: Total Pot ({format_money(total_pot)}). "
        f"Distributed: Skins ({format_money(skins)}) + CTH ({format_money(cth)}) "
        f"+ Overall Winners ({format_money(overall)}) "
        f"+ Rollover ({format_money(rollover)}) = {format_money(distributed)}."
    )
    if not is_balanced:
        direction = "short of" if discrepancy > 0 else "over"
        message += (
            f" Discrepancy: {format_money(abs(discrepancy))} {direction} the pot;"
            " review payouts manually before finalizing."
        )
    return message


def aggregate_payouts(
    financials: RoundFinancials,
    teams: Sequence[Team],
    skins: SkinsResult,
    contests: ContestPayouts,
    *,
    tolerance: Decimal = PAYOUT_TOLERANCE,
) -> PayoutReport:
    """Sum every golfer's skins, CTH and overall winnings and check the pot.

    Skins are split evenly among the winning team's golfers, CTH goes to the
    individual winner and the overall payout uses the shares already split by
    the contest calculator. The distributed total plus any final skin
    rollover must equal the pot within ``tolerance``. A mismatch does not
    raise: it is described in the verification message and logged so the
    round can still be finalized after a manual review.
    """

    skins_shares = split_team_winnings(teams, skins.team_winnings)
    overall_shares = contests.overall.member_shares

    player_payouts: list[PlayerPayoutSummary] = []
    for team in teams:
        for golfer_id in team.golfer_ids:
            cth = ZERO
            if contests.cth is not None and contests.cth.golfer_id == golfer_id:
                cth = contests.cth.amount
            breakdown = PayoutBreakdown(
                skins_winnings=skins_shares.get(golfer_id, ZERO),
                cth_winnings=cth,
                overall_winnings=overall_shares.get(golfer_id, ZERO),
            )
            player_payouts.append(
                PlayerPayoutSummary(
                    golfer_id=golfer_id,
                    team_id=team.id,
                    total_winnings=to_money(
                        breakdown.skins_winnings
                        + breakdown.cth_winnings
                        + breakdown.overall_winnings
                    ),
                    breakdown=breakdown,
                )
            )

    skins_total = total([p.breakdown.skins_winnings for p in player_payouts])
    cth_total = total([p.breakdown.cth_winnings for p in player_payouts])
    overall_total = total([p.breakdown.overall_winnings for p in player_payouts])
    distributed = total([p.total_winnings for p in player_payouts])
    rollover = to_money(skins.final_skin_rollover_amount)
    total_pot = to_money(financials.total_pot)

    discrepancy = to_money(total_pot - distributed - rollover)
    is_balanced = abs(discrepancy) <= tolerance
    message = _verification_message(
        total_pot=total_pot,
        skins=skins_total,
        cth=cth_total,
        overall=overall_total,
        rollover=rollover,
        discrepancy=discrepancy,
        is_balanced=is_balanced,
    )
    if not is_balanced:
        logger.warning("Payout verification failed: %s", message)

    return PayoutReport(
        player_payouts=player_payouts,
        verification=PayoutVerification(
            total_pot=total_pot,
            total_distributed=distributed,
            final_skin_rollover_amount=rollover,
            discrepancy=discrepancy,
            is_balanced=is_balanced,
            message=message,
        ),
    )


def _check_inputs(
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    cth_winner_golfer_id: str,
    overall_winner_team_id: Optional[str],
) -> None:
    if not teams:
        raise ValueError("at least one team is required")
    missing = missing_scores(teams, scores)
    if missing:
        raise IncompleteScoresError(missing)
    if not any(cth_winner_golfer_id in team.golfer_ids for team in teams):
        raise InvalidWinnerError(
            f"CTH winner '{cth_winner_golfer_id}' is not a participant in this round"
        )
    if overall_winner_team_id is not None and not any(
        team.id == overall_winner_team_id for team in teams
    ):
        raise InvalidWinnerError(
            f"overall winner team '{overall_winner_team_id}' is not a team in this round"
        )


def calculate_round_payouts(
    financials: RoundFinancials,
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    *,
    cth_winner_golfer_id: str,
    overall_winner_team_id: Optional[str] = None,
    tolerance: Decimal = PAYOUT_TOLERANCE,
) -> RoundPayoutResult:
    """Run skins, contest payouts and aggregation for a completed round.

    Every input problem is reported before any amount is computed, so a call
    either returns a full result or raises without producing anything.

    Raises:
        IncompleteScoresError: If any team is missing any hole.
        InvalidWinnerError: If a contest winner does not belong to the round.
    """

    _check_inputs(teams, scores, cth_winner_golfer_id, overall_winner_team_id)

    skins = evaluate_skins(teams, scores, financials.skin_value_per_hole)
    contests = calculate_contest_payouts(
        teams,
        scores,
        cth_winner_golfer_id=cth_winner_golfer_id,
        cth_payout=financials.cth_payout,
        total_pot=financials.total_pot,
        total_skins_paid=skins.total_skins_paid,
        final_skin_rollover_amount=skins.final_skin_rollover_amount,
        overall_winner_team_id=overall_winner_team_id,
    )
    report = aggregate_payouts(financials, teams, skins, contests, tolerance=tolerance)

    return RoundPayoutResult(
        total_pot=financials.total_pot,
        skins=skins,
        cth=contests.cth,
        overall_winner=contests.overall,
        player_payouts=report.player_payouts,
        verification=report.verification,
    )
