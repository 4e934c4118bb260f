"""Round lifecycle: setup, start, scoring, completion and finalization.

Rounds move ``PendingSetup -> SetupComplete -> InProgress -> Completed ->
Finalized``, one step at a time and never backwards. Each operation takes a
round and returns an updated copy; nothing is stored here.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ..exceptions import IncompleteScoresError, RoundStateError
from ..schemas import (
    FinancialConfiguration,
    Round,
    RoundPayoutResult,
    RoundStatus,
    ScoreEntry,
    Team,
)
from .financials import resolve_round_financials
from .payouts import calculate_round_payouts
from .validation import missing_scores, validate_round_setup, validate_score_entries

logger = logging.getLogger(__name__)

ROUND_TRANSITIONS: dict[RoundStatus, RoundStatus] = {
    RoundStatus.PENDING_SETUP: RoundStatus.SETUP_COMPLETE,
    RoundStatus.SETUP_COMPLETE: RoundStatus.IN_PROGRESS,
    RoundStatus.IN_PROGRESS: RoundStatus.COMPLETED,
    RoundStatus.COMPLETED: RoundStatus.FINALIZED,
}

SCORING_STATUSES = frozenset(
    {RoundStatus.PENDING_SETUP, RoundStatus.SETUP_COMPLETE, RoundStatus.IN_PROGRESS}
)


def can_transition(current: RoundStatus, target: RoundStatus) -> bool:
    return ROUND_TRANSITIONS.get(current) == target


def _transition(round_: Round, target: RoundStatus, **changes) -> Round:
    if not can_transition(round_.status, target):
        raise RoundStateError(
            f"round '{round_.id}' cannot move from {round_.status.value} to "
            f"{target.value}"
        )
    logger.info(
        "Round %s: %s -> %s", round_.id, round_.status.value, target.value
    )
    return round_.model_copy(update={"status": target, **changes})


def create_round(round_id: str, course_id: str) -> Round:
    return Round(id=round_id, course_id=course_id)


def assign_teams(round_: Round, teams: Sequence[Team]) -> Round:
    """Attach the team roster and mark setup complete.

    Raises:
        ValidationError: If the roster breaks the setup rules.
        RoundStateError: If the round is not pending setup.
    """

    if round_.status != RoundStatus.PENDING_SETUP:
        raise RoundStateError(
            f"teams can only be assigned while round '{round_.id}' is "
            f"{RoundStatus.PENDING_SETUP.value} (currently {round_.status.value})"
        )
    validate_round_setup(teams)
    return _transition(round_, RoundStatus.SETUP_COMPLETE, teams=list(teams))


def start_round(round_: Round, config: FinancialConfiguration) -> Round:
    """Freeze the round's pot, skin value and CTH payout, then start play.

    Raises:
        ConfigurationError: If the configuration cannot be resolved.
        RoundStateError: If setup is not complete.
    """

    if round_.status != RoundStatus.SETUP_COMPLETE:
        raise RoundStateError(
            f"round '{round_.id}' must be {RoundStatus.SETUP_COMPLETE.value} to "
            f"start (currently {round_.status.value})"
        )
    financials = resolve_round_financials(config, len(round_.participant_ids))
    return _transition(round_, RoundStatus.IN_PROGRESS, financials=financials)


def record_scores(
    round_: Round,
    scorecard: Mapping[Tuple[str, int], int],
    entries: Sequence[ScoreEntry],
) -> Dict[Tuple[str, int], int]:
    """Validate ``entries`` and return ``scorecard`` updated with them.

    Entries for holes that already have a score replace the old value.

    Raises:
        ValidationError: If an entry is invalid.
        RoundStateError: If the round no longer accepts scores.
    """

    if round_.status not in SCORING_STATUSES:
        raise RoundStateError(
            f"scores cannot be submitted for a round that is already "
            f"'{round_.status.value}'"
        )
    submitted = validate_score_entries(entries, [team.id for team in round_.teams])
    updated = dict(scorecard)
    updated.update(submitted)
    return updated


def complete_round(
    round_: Round,
    scorecard: Mapping[Tuple[str, int], int],
    *,
    cth_winner_golfer_id: str,
    overall_winner_team_id: Optional[str] = None,
) -> tuple[Round, RoundPayoutResult]:
    """Compute payouts for a fully scored round and mark it completed.

    The verification message is stored on the round even when the pot does
    not balance so it can be reviewed before finalizing.

    Raises:
        RoundStateError: If the round is not in progress.
        IncompleteScoresError: If any team is missing any hole.
        InvalidWinnerError: If a contest winner does not belong to the round.
    """

    if round_.status != RoundStatus.IN_PROGRESS or round_.financials is None:
        raise RoundStateError(
            f"round '{round_.id}' must be {RoundStatus.IN_PROGRESS.value} to "
            f"complete (currently {round_.status.value})"
        )
    missing = missing_scores(round_.teams, scorecard)
    if missing:
        raise IncompleteScoresError(missing)

    result = calculate_round_payouts(
        round_.financials,
        round_.teams,
        scorecard,
        cth_winner_golfer_id=cth_winner_golfer_id,
        overall_winner_team_id=overall_winner_team_id,
    )
    completed = _transition(
        round_,
        RoundStatus.COMPLETED,
        cth_winner_golfer_id=cth_winner_golfer_id,
        overall_winner_team_id=result.overall_winner.team_id,
        final_skin_rollover_amount=result.skins.final_skin_rollover_amount,
        final_total_skins_payout=result.skins.total_skins_paid,
        final_overall_winner_payout_amount=result.overall_winner.amount,
        payout_verification_message=result.payout_verification_message,
    )
    return completed, result


def finalize_round(round_: Round) -> Round:
    """Confirm a completed round. Finalized rounds accept no further changes."""

    return _transition(round_, RoundStatus.FINALIZED)
