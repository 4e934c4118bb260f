"""Resolve and validate a group's buy-in and payout formulas."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from ..config import HOLES_PER_ROUND, MAX_ROUND_PLAYERS, MIN_ROUND_PLAYERS
from ..exceptions import ConfigurationError
from ..money import format_money, to_money
from ..schemas import (
    FinancialConfiguration,
    FixedAmountFormula,
    PayoutFormula,
    PerPlayerFormula,
    PotPercentageFormula,
    RoundFinancials,
)

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


def describe_formula(formula: PayoutFormula) -> str:
    """Return a short human-readable rendering of ``formula``."""

    if isinstance(formula, FixedAmountFormula):
        return f"fixed {formula.amount}"
    if isinstance(formula, PotPercentageFormula):
        suffix = f" / {formula.divisor}" if formula.divisor != 1 else ""
        return f"{formula.percent}% of pot{suffix}"
    if isinstance(formula, PerPlayerFormula):
        return (
            f"{formula.base} + (players - {formula.baseline_players}) "
            f"* {formula.per_player}"
        )
    raise TypeError(f"unsupported formula type: {type(formula).__name__}")


def evaluate_formula(
    formula: PayoutFormula, *, num_players: int, buy_in_amount: Decimal
) -> Decimal:
    """Evaluate ``formula`` for a round of ``num_players`` golfers.

    The result is not rounded; callers decide how to round it.

    Raises:
        ArithmeticError: If the formula cannot be evaluated to a number.
    """

    if isinstance(formula, FixedAmountFormula):
        value = Decimal(formula.amount)
    elif isinstance(formula, PotPercentageFormula):
        total_pot = Decimal(buy_in_amount) * num_players
        value = total_pot * Decimal(formula.percent) / _HUNDRED / formula.divisor
    elif isinstance(formula, PerPlayerFormula):
        extra_players = num_players - formula.baseline_players
        value = Decimal(formula.base) + extra_players * Decimal(formula.per_player)
    else:
        raise TypeError(f"unsupported formula type: {type(formula).__name__}")

    if not value.is_finite():
        raise InvalidOperation(f"formula evaluated to {value}")
    return value


def _resolve_amount(
    label: str,
    formula: PayoutFormula,
    *,
    num_players: int,
    buy_in_amount: Decimal,
    allow_zero: bool,
) -> Decimal:
    try:
        raw = evaluate_formula(
            formula, num_players=num_players, buy_in_amount=buy_in_amount
        )
    except ArithmeticError as exc:
        raise ConfigurationError(
            f"{label} formula ({describe_formula(formula)}) could not be "
            f"evaluated for {num_players} players: {exc}"
        )

    amount = to_money(raw)
    if amount < 0 or (amount == 0 and not allow_zero):
        requirement = "non-negative" if allow_zero else "positive"
        raise ConfigurationError(
            f"{label} formula ({describe_formula(formula)}) must yield a "
            f"{requirement} amount for {num_players} players (got {format_money(amount)})."
        )
    return amount


def resolve_round_financials(
    config: FinancialConfiguration, num_players: int
) -> RoundFinancials:
    """Freeze the per-hole skin value and CTH payout for a round.

    The returned values are meant to be stored on the round when it starts so
    later edits to the group's configuration never change a round in play.
    A CTH payout of zero is accepted and means no CTH prize is paid.

    Raises:
        ConfigurationError: If the configuration is not validated, the buy-in
            or player count is not positive, or a formula yields a
            non-finite, negative, or (for skins) zero amount.
    """

    if not config.is_validated:
        raise ConfigurationError(
            "financial configuration must be validated before it can be used"
        )
    if num_players < 1:
        raise ConfigurationError(f"number of players must be positive (got {num_players})")

    buy_in_amount = to_money(config.buy_in_amount)
    if buy_in_amount <= 0:
        raise ConfigurationError("buy-in amount must be greater than zero")

    skin_value = _resolve_amount(
        "Skin value",
        config.skin_value_formula,
        num_players=num_players,
        buy_in_amount=buy_in_amount,
        allow_zero=False,
    )
    cth_payout = _resolve_amount(
        "CTH payout",
        config.cth_payout_formula,
        num_players=num_players,
        buy_in_amount=buy_in_amount,
        allow_zero=True,
    )
    total_pot = to_money(buy_in_amount * num_players)

    logger.debug(
        "Resolved financials for %d players: pot=%s skin=%s cth=%s",
        num_players,
        total_pot,
        skin_value,
        cth_payout,
    )
    return RoundFinancials(
        num_players=num_players,
        buy_in_amount=buy_in_amount,
        total_pot=total_pot,
        skin_value_per_hole=skin_value,
        cth_payout=cth_payout,
        financial_configuration_id=config.id,
    )


def validate_financial_configuration(
    config: FinancialConfiguration,
    *,
    min_players: int = MIN_ROUND_PLAYERS,
    max_players: int = MAX_ROUND_PLAYERS,
) -> tuple[bool, list[str]]:
    """Simulate ``config`` for every supported player count.

    For each count both formulas must evaluate to non-negative amounts and the
    pot must still hold a positive payout for the overall winner after every
    skin and the CTH prize are paid.

    Returns:
        ``(is_valid, errors)`` where ``errors`` lists every problem found.
    """

    errors: list[str] = []
    buy_in_amount = to_money(config.buy_in_amount)
    if buy_in_amount <= 0:
        return False, ["Buy-in amount must be greater than zero."]

    simulation_failed = False
    shortfall_found = False
    for players in range(min_players, max_players + 1):
        amounts: dict[str, Decimal] = {}
        for label, formula in (
            ("Skin value", config.skin_value_formula),
            ("CTH payout", config.cth_payout_formula),
        ):
            try:
                value = to_money(
                    evaluate_formula(
                        formula, num_players=players, buy_in_amount=buy_in_amount
                    )
                )
            except ArithmeticError:
                errors.append(
                    f"{label} formula ({describe_formula(formula)}) could not be "
                    f"evaluated for {players} players."
                )
                simulation_failed = True
                continue
            if value < 0:
                errors.append(
                    f"Calculated {label.lower()} is negative ({format_money(value)}) "
                    f"for {players} players using formula {describe_formula(formula)}."
                )
                simulation_failed = True
                continue
            amounts[label] = value

        if len(amounts) != 2:
            continue

        total_pot = buy_in_amount * players
        skins_total = HOLES_PER_ROUND * amounts["Skin value"]
        remaining = total_pot - skins_total - amounts["CTH payout"]
        if remaining <= 0:
            errors.append(
                f"Configuration is invalid for {players} players: does not "
                "guarantee a positive payout for the overall winner "
                f"(remaining: {format_money(remaining)}). Pot: {format_money(total_pot)}, "
                f"skins total: {format_money(skins_total)}, "
                f"CTH: {format_money(amounts['CTH payout'])}."
            )
            shortfall_found = True

    if simulation_failed and not shortfall_found:
        errors.insert(
            0,
            "The financial configuration is invalid due to issues found during "
            f"player count simulations ({min_players}-{max_players}).",
        )
    return not errors, errors


def mark_validated(config: FinancialConfiguration) -> FinancialConfiguration:
    """Return a validated copy of ``config``.

    Raises:
        ConfigurationError: With every simulation problem when invalid.
    """

    is_valid, errors = validate_financial_configuration(config)
    if not is_valid:
        raise ConfigurationError(" ".join(errors))
    return config.model_copy(update={"is_validated": True})
