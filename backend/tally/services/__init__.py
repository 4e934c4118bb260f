"""Internal application services (pure helpers, no I/O)."""

from .validation import (
    ValidationError,
    is_scorecard_complete,
    missing_scores,
    validate_round_setup,
    validate_score_entries,
)
from .financials import (
    mark_validated,
    resolve_round_financials,
    validate_financial_configuration,
)
from .skins import evaluate_skins, split_team_winnings
from .contests import calculate_contest_payouts, determine_overall_winner
from .payouts import aggregate_payouts, calculate_round_payouts
from .rounds import (
    assign_teams,
    complete_round,
    create_round,
    finalize_round,
    record_scores,
    start_round,
)

__all__ = [
    "ValidationError",
    "validate_round_setup",
    "validate_score_entries",
    "missing_scores",
    "is_scorecard_complete",
    "resolve_round_financials",
    "validate_financial_configuration",
    "mark_validated",
    "evaluate_skins",
    "split_team_winnings",
    "determine_overall_winner",
    "calculate_contest_payouts",
    "aggregate_payouts",
    "calculate_round_payouts",
    "create_round",
    "assign_teams",
    "start_round",
    "record_scores",
    "complete_round",
    "finalize_round",
]
