from decimal import Decimal
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
    model_validator,
)

from .money import to_money

Money = Annotated[Decimal, BeforeValidator(to_money)]
PositiveMoney = Annotated[Decimal, BeforeValidator(to_money), Field(gt=0)]
NonNegativeMoney = Annotated[Decimal, BeforeValidator(to_money), Field(ge=0)]


def _strip_identifier(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field_name} must not be empty")
    return trimmed


class RoundStatus(str, Enum):
    PENDING_SETUP = "PendingSetup"
    SETUP_COMPLETE = "SetupComplete"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FINALIZED = "Finalized"


# -----------------------------------------------------------------------------
# Financial configuration
# -----------------------------------------------------------------------------
class FixedAmountFormula(BaseModel):
    """A flat amount regardless of how many golfers play."""

    kind: Literal["fixed"] = "fixed"
    amount: Decimal

    model_config = ConfigDict(frozen=True, extra="forbid")


class PotPercentageFormula(BaseModel):
    """``percent`` of the total pot, divided by ``divisor`` (e.g. 18 holes)."""

    kind: Literal["pot_percentage"] = "pot_percentage"
    percent: Decimal = Field(..., ge=0, le=100)
    divisor: int = Field(1, gt=0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class PerPlayerFormula(BaseModel):
    """``base`` at ``baseline_players``, plus ``per_player`` for each extra golfer."""

    kind: Literal["per_player"] = "per_player"
    base: Decimal
    per_player: Decimal
    baseline_players: int = Field(6, ge=0)

    model_config = ConfigDict(frozen=True, extra="forbid")


PayoutFormula = Annotated[
    Union[FixedAmountFormula, PotPercentageFormula, PerPlayerFormula],
    Field(discriminator="kind"),
]


class FinancialConfiguration(BaseModel):
    id: Optional[str] = None
    buy_in_amount: Money
    skin_value_formula: PayoutFormula
    cth_payout_formula: PayoutFormula
    is_validated: bool = False

    model_config = ConfigDict(frozen=True)


class FinancialValidationOut(BaseModel):
    is_valid: bool
    errors: List[str]


class RoundFinancials(BaseModel):
    """Payout values frozen onto a round when it starts."""

    num_players: int = Field(..., ge=1)
    buy_in_amount: PositiveMoney
    total_pot: PositiveMoney
    skin_value_per_hole: PositiveMoney
    cth_payout: NonNegativeMoney
    financial_configuration_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_total_pot(self) -> "RoundFinancials":
        expected = to_money(self.buy_in_amount * self.num_players)
        if self.total_pot != expected:
            raise ValueError(
                f"total_pot {self.total_pot} does not match buy-in "
                f"{self.buy_in_amount} x {self.num_players} players ({expected})"
            )
        return self


class ResolveFinancialsRequest(BaseModel):
    configuration: FinancialConfiguration
    num_players: int


# -----------------------------------------------------------------------------
# Teams and scores
# -----------------------------------------------------------------------------
class Team(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    golfer_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        return _strip_identifier(value, "id")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _strip_identifier(value, "name")

    @field_validator("golfer_ids", mode="before")
    @classmethod
    def _validate_golfer_ids(cls, value: List[str]) -> List[str]:
        if not isinstance(value, (list, tuple)):
            raise TypeError("golfer_ids must be a list of strings")
        return [_strip_identifier(v, "golfer id") for v in value]


class ScoreEntry(BaseModel):
    team_id: str
    hole_number: StrictInt
    score: StrictInt

    model_config = ConfigDict(frozen=True)


# -----------------------------------------------------------------------------
# Payout results
# -----------------------------------------------------------------------------
class HoleResult(BaseModel):
    hole_number: int
    low_score: int
    winning_team_id: Optional[str] = None
    tied_team_ids: List[str] = Field(default_factory=list)
    rollover_count: int = 0
    skin_value_won: Money = Decimal("0.00")
    is_carry_over_win: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_skin_winner(self) -> bool:
        return self.winning_team_id is not None


class SkinsResult(BaseModel):
    hole_results: List[HoleResult]
    team_winnings: Dict[str, Money]
    total_skins_paid: Money
    final_rollover_count: int
    final_skin_rollover_amount: Money

    model_config = ConfigDict(frozen=True)


class CthPayoutDetail(BaseModel):
    golfer_id: str
    team_id: str
    amount: Money

    model_config = ConfigDict(frozen=True)


class OverallWinnerPayoutDetail(BaseModel):
    team_id: str
    amount: Money
    member_shares: Dict[str, Money]
    total_strokes: int
    is_override: bool = False
    tied_team_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ContestPayouts(BaseModel):
    cth: Optional[CthPayoutDetail] = None
    overall: OverallWinnerPayoutDetail

    model_config = ConfigDict(frozen=True)


class PayoutBreakdown(BaseModel):
    skins_winnings: Money = Decimal("0.00")
    cth_winnings: Money = Decimal("0.00")
    overall_winnings: Money = Decimal("0.00")

    model_config = ConfigDict(frozen=True)


class PlayerPayoutSummary(BaseModel):
    golfer_id: str
    team_id: str
    total_winnings: Money
    breakdown: PayoutBreakdown

    model_config = ConfigDict(frozen=True)


class PayoutVerification(BaseModel):
    total_pot: Money
    total_distributed: Money
    final_skin_rollover_amount: Money
    discrepancy: Money
    is_balanced: bool
    message: str

    model_config = ConfigDict(frozen=True)


class PayoutReport(BaseModel):
    player_payouts: List[PlayerPayoutSummary]
    verification: PayoutVerification

    model_config = ConfigDict(frozen=True)


class RoundPayoutResult(BaseModel):
    total_pot: Money
    skins: SkinsResult
    cth: Optional[CthPayoutDetail] = None
    overall_winner: OverallWinnerPayoutDetail
    player_payouts: List[PlayerPayoutSummary]
    verification: PayoutVerification

    model_config = ConfigDict(frozen=True)

    @property
    def payout_verification_message(self) -> str:
        return self.verification.message


class RoundPayoutRequest(BaseModel):
    financials: RoundFinancials
    teams: List[Team] = Field(..., min_length=1)
    scores: List[ScoreEntry]
    cth_winner_golfer_id: str
    overall_winner_team_id: Optional[str] = None


# -----------------------------------------------------------------------------
# Rounds
# -----------------------------------------------------------------------------
class Round(BaseModel):
    id: str
    course_id: str
    status: RoundStatus = RoundStatus.PENDING_SETUP
    teams: List[Team] = Field(default_factory=list)
    financials: Optional[RoundFinancials] = None
    cth_winner_golfer_id: Optional[str] = None
    overall_winner_team_id: Optional[str] = None
    final_skin_rollover_amount: Optional[Money] = None
    final_total_skins_payout: Optional[Money] = None
    final_overall_winner_payout_amount: Optional[Money] = None
    payout_verification_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def participant_ids(self) -> List[str]:
        return [golfer_id for team in self.teams for golfer_id in team.golfer_ids]
