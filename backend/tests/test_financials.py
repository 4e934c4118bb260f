from decimal import Decimal

import pydantic
import pytest

from tally.exceptions import ConfigurationError
from tally.schemas import (
    FinancialConfiguration,
    FixedAmountFormula,
    PerPlayerFormula,
    PotPercentageFormula,
    RoundFinancials,
)
from tally.services.financials import (
    describe_formula,
    evaluate_formula,
    mark_validated,
    resolve_round_financials,
    validate_financial_configuration,
)


def _config(buy_in="20", skin=None, cth=None, validated=True):
    return FinancialConfiguration(
        id="cfg-1",
        buy_in_amount=buy_in,
        skin_value_formula=skin or FixedAmountFormula(amount="5"),
        cth_payout_formula=cth or FixedAmountFormula(amount="20"),
        is_validated=validated,
    )


def test_resolves_fixed_amounts() -> None:
    financials = resolve_round_financials(_config(), 8)
    assert financials.num_players == 8
    assert financials.total_pot == Decimal("160.00")
    assert financials.skin_value_per_hole == Decimal("5.00")
    assert financials.cth_payout == Decimal("20.00")
    assert financials.financial_configuration_id == "cfg-1"


def test_pot_percentage_is_rounded_to_cents() -> None:
    cfg = _config(skin=PotPercentageFormula(percent="50", divisor=18))
    # 160 * 50% / 18 = 4.444...
    assert resolve_round_financials(cfg, 8).skin_value_per_hole == Decimal("4.44")


@pytest.mark.parametrize(
    "players, expected",
    [(6, Decimal("2.00")), (7, Decimal("2.50")), (10, Decimal("4.00"))],
)
def test_per_player_formula_scales_from_baseline(players, expected) -> None:
    cfg = _config(skin=PerPlayerFormula(base="2", per_player="0.5"))
    assert resolve_round_financials(cfg, players).skin_value_per_hole == expected


def test_formula_values_are_not_rounded_before_use() -> None:
    value = evaluate_formula(
        PotPercentageFormula(percent="10", divisor=3),
        num_players=1,
        buy_in_amount=Decimal("1"),
    )
    assert value != value.quantize(Decimal("0.01"))


def test_formula_kind_is_discriminated_from_payload() -> None:
    cfg = FinancialConfiguration.model_validate(
        {
            "buy_in_amount": "25",
            "skin_value_formula": {"kind": "per_player", "base": 2, "per_player": "0.5"},
            "cth_payout_formula": {"kind": "pot_percentage", "percent": 10},
        }
    )
    assert isinstance(cfg.skin_value_formula, PerPlayerFormula)
    assert isinstance(cfg.cth_payout_formula, PotPercentageFormula)
    assert not cfg.is_validated
    assert describe_formula(cfg.cth_payout_formula) == "10% of pot"


def test_unvalidated_configuration_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="must be validated"):
        resolve_round_financials(_config(validated=False), 8)


@pytest.mark.parametrize("players", [0, -3])
def test_player_count_must_be_positive(players) -> None:
    with pytest.raises(ConfigurationError, match="number of players"):
        resolve_round_financials(_config(), players)


def test_zero_skin_value_is_rejected() -> None:
    cfg = _config(skin=FixedAmountFormula(amount="0"))
    with pytest.raises(ConfigurationError, match="positive amount"):
        resolve_round_financials(cfg, 8)


def test_negative_formula_result_is_rejected() -> None:
    cfg = _config(skin=PerPlayerFormula(base="2", per_player="-1"))
    with pytest.raises(ConfigurationError) as exc:
        resolve_round_financials(cfg, 10)
    assert exc.value.status_code == 422
    assert exc.value.code == "configuration_error"


def test_zero_cth_payout_is_allowed() -> None:
    cfg = _config(cth=FixedAmountFormula(amount="0"))
    assert resolve_round_financials(cfg, 8).cth_payout == Decimal("0.00")


def test_valid_configuration_covers_every_player_count() -> None:
    is_valid, errors = validate_financial_configuration(_config(validated=False))
    assert is_valid
    assert errors == []


def test_configuration_that_cannot_fund_the_overall_winner_is_invalid() -> None:
    # 6 players x $10 = $60 cannot cover 18 skins at $5
    is_valid, errors = validate_financial_configuration(_config(buy_in="10"))
    assert not is_valid
    assert any("invalid for 6 players" in e for e in errors)
    assert all("players" in e for e in errors)


def test_zero_buy_in_fails_without_simulating() -> None:
    is_valid, errors = validate_financial_configuration(_config(buy_in="0"))
    assert not is_valid
    assert errors == ["Buy-in amount must be greater than zero."]


def test_negative_results_are_summarised() -> None:
    # skin value drops below zero from 12 players on
    cfg = _config(
        skin=PerPlayerFormula(base="5", per_player="-1"),
        cth=FixedAmountFormula(amount="0"),
    )
    is_valid, errors = validate_financial_configuration(cfg)
    assert not is_valid
    assert errors[0].startswith("The financial configuration is invalid")
    assert "(6-30)" in errors[0]
    assert any("negative" in e and "12 players" in e for e in errors[1:])


def test_mark_validated_returns_validated_copy() -> None:
    cfg = _config(validated=False)
    validated = mark_validated(cfg)
    assert validated.is_validated
    assert not cfg.is_validated


def test_mark_validated_raises_with_all_errors() -> None:
    with pytest.raises(ConfigurationError, match="invalid for 6 players"):
        mark_validated(_config(buy_in="10", validated=False))


def _financials(**overrides):
    values = {
        "num_players": 8,
        "buy_in_amount": "20",
        "total_pot": "160",
        "skin_value_per_hole": "5",
        "cth_payout": "20",
    }
    values.update(overrides)
    return RoundFinancials.model_validate(values)


def test_round_financials_accepts_consistent_pot() -> None:
    financials = _financials(cth_payout="0")
    assert financials.total_pot == Decimal("160.00")
    assert financials.cth_payout == Decimal("0.00")


@pytest.mark.parametrize(
    "overrides",
    [
        {"total_pot": "1000"},
        {"num_players": 0, "total_pot": "0"},
        {"skin_value_per_hole": "-5"},
        {"skin_value_per_hole": "0"},
        {"cth_payout": "-1"},
        {"buy_in_amount": "-20", "total_pot": "-160"},
    ],
    ids=[
        "pot-not-buy-in-times-players",
        "no-players",
        "negative-skin",
        "zero-skin",
        "negative-cth",
        "negative-buy-in",
    ],
)
def test_round_financials_rejects_inconsistent_values(overrides) -> None:
    with pytest.raises(pydantic.ValidationError):
        _financials(**overrides)
