# backend/tally/routers/rounds.py
import logging

from fastapi import APIRouter

from ..exceptions import ProblemDetail, http_problem
from ..schemas import (
    FinancialConfiguration,
    FinancialValidationOut,
    ResolveFinancialsRequest,
    RoundFinancials,
    RoundPayoutRequest,
    RoundPayoutResult,
)
from ..services import (
    ValidationError,
    calculate_round_payouts,
    resolve_round_financials,
    validate_financial_configuration,
    validate_round_setup,
    validate_score_entries,
)

logger = logging.getLogger(__name__)

# Resource-only prefix
router = APIRouter(
    prefix="/rounds",
    tags=["rounds"],
    responses={
        400: {"model": ProblemDetail},
        409: {"model": ProblemDetail},
        422: {"model": ProblemDetail},
    },
)


# POST /api/v0/rounds/financials/validate
@router.post("/financials/validate", response_model=FinancialValidationOut)
def validate_financials(body: FinancialConfiguration) -> FinancialValidationOut:
    is_valid, errors = validate_financial_configuration(body)
    return FinancialValidationOut(is_valid=is_valid, errors=errors)


# POST /api/v0/rounds/financials/resolve
@router.post("/financials/resolve", response_model=RoundFinancials)
def resolve_financials(body: ResolveFinancialsRequest) -> RoundFinancials:
    return resolve_round_financials(body.configuration, body.num_players)


# POST /api/v0/rounds/payouts
@router.post("/payouts", response_model=RoundPayoutResult)
def calculate_payouts(body: RoundPayoutRequest) -> RoundPayoutResult:
    try:
        validate_round_setup(body.teams)
    except ValidationError as exc:
        raise http_problem(
            status_code=422,
            detail=exc.detail,
            code="invalid_round_setup",
        )
    num_players = sum(len(t.golfer_ids) for t in body.teams)
    if num_players != body.financials.num_players:
        raise http_problem(
            status_code=422,
            detail=(
                f"teams list {num_players} golfers but the round was started "
                f"for {body.financials.num_players}"
            ),
            code="invalid_round_setup",
        )
    try:
        scorecard = validate_score_entries(body.scores, [t.id for t in body.teams])
    except ValidationError as exc:
        raise http_problem(
            status_code=422,
            detail=exc.detail,
            code="invalid_scores",
        )

    result = calculate_round_payouts(
        body.financials,
        body.teams,
        scorecard,
        cth_winner_golfer_id=body.cth_winner_golfer_id,
        overall_winner_team_id=body.overall_winner_team_id,
    )
    logger.info(
        "Calculated payouts: pot=%s skins=%s rollover=%s balanced=%s",
        result.total_pot,
        result.skins.total_skins_paid,
        result.skins.final_skin_rollover_amount,
        result.verification.is_balanced,
    )
    return result
