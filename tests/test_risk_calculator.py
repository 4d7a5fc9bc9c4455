"""
Unit tests for the ROSI calculation engine.

Covers input clamping, the loss expectancy formulas, downtime savings and the
ROSI cost policy.
"""

import math
from dataclasses import replace

import pytest

from reference_data import (
    ControlCostTable,
    DrStrategy,
    InvalidReference,
    ReferenceTables,
    SectorProfile,
)
from risk_calculator import (
    CalculationInput,
    Rosi,
    ale_post,
    ale_pre,
    clamp_percent,
    compute_all,
    downtime_loss,
    return_on_security_investment,
    single_loss_expectancy,
    to_number,
)

FINANCE = SectorProfile(0.20, 6_080_000.0, 5_600_000.0)
COLD = DrStrategy(336.0, 10_000.0)


class TestClampPercent:
    """Exposure factor clamping."""

    @pytest.mark.parametrize("value", [-50, -0.1, 0, 12.5, 100, 100.1, 1e9, "42", None, "abc"])
    def test_in_range_and_idempotent(self, value):
        once = clamp_percent(value)
        assert 0.0 <= once <= 100.0
        assert clamp_percent(once) == once

    def test_values(self):
        assert clamp_percent(-5) == 0.0
        assert clamp_percent(150) == 100.0
        assert clamp_percent(37.5) == 37.5

    def test_non_numeric_becomes_zero(self):
        assert to_number(None) == 0.0
        assert to_number("") == 0.0
        assert to_number("nope") == 0.0
        assert to_number(float("nan")) == 0.0
        assert to_number("12.5") == 12.5

    def test_huge_int_does_not_overflow(self):
        assert to_number(10**400) == 0.0
        assert clamp_percent(10**400) == 0.0
        assert clamp_percent(-(10**400)) == 0.0

    @pytest.mark.parametrize("value", ["inf", "-inf", float("inf"), float("-inf")])
    def test_non_finite_becomes_zero(self, value):
        assert to_number(value) == 0.0
        assert clamp_percent(value) == 0.0


class TestLossExpectancy:
    """SLE and ALE formulas."""

    @pytest.mark.parametrize("asset", [0, 1, 250_000, 1_000_000])
    def test_sle_bounds(self, asset):
        assert single_loss_expectancy(asset, 0) == 0
        assert single_loss_expectancy(asset, 100) == asset

    def test_sle_clamps_exposure(self):
        assert single_loss_expectancy(1_000, 250) == 1_000
        assert single_loss_expectancy(1_000, -10) == 0

    def test_ale_pre(self):
        assert ale_pre(FINANCE, 6_080_000, 50) == pytest.approx(608_000)

    def test_ale_post_without_controls_equals_pre(self):
        assert ale_post(FINANCE, 6_080_000, 50) == pytest.approx(ale_pre(FINANCE, 6_080_000, 50))

    def test_mfa_halves(self):
        base = ale_post(FINANCE, 1_000_000, 40)
        assert ale_post(FINANCE, 1_000_000, 40, mfa=True) == pytest.approx(base * 0.5)

    def test_phishing_reduces_by_twenty_percent(self):
        base = ale_post(FINANCE, 1_000_000, 40)
        assert ale_post(FINANCE, 1_000_000, 40, phishing=True) == pytest.approx(base * 0.8)

    def test_both_controls_compose(self):
        base = ale_post(FINANCE, 1_000_000, 40)
        assert ale_post(FINANCE, 1_000_000, 40, mfa=True, phishing=True) == pytest.approx(base * 0.4)


class TestDowntime:
    """Downtime loss and savings."""

    def test_downtime_loss(self):
        assert downtime_loss(FINANCE, COLD) == pytest.approx(5_600_000 * 336)

    def test_succession_discount(self):
        assert downtime_loss(FINANCE, COLD, succession=True) == pytest.approx(5_600_000 * 0.9 * 336)

    def test_money_saved_never_negative(self, tables):
        for sector in tables.sector_names():
            for strategy in tables.strategy_names():
                for succession in (False, True):
                    result = compute_all(
                        CalculationInput(sector=sector, strategy=strategy, succession=succession),
                        tables,
                    )
                    assert result.money_saved >= 0

    def test_money_saved_zero_at_baseline(self, tables):
        result = compute_all(CalculationInput(sector="Retail", strategy="Cold Site"), tables)
        assert result.money_saved == 0
        assert result.downtime_baseline == result.downtime_selected

    def test_baseline_ignores_user_succession(self, tables):
        result = compute_all(
            CalculationInput(sector="Retail", strategy="Cold Site", succession=True), tables
        )
        assert result.downtime_baseline == pytest.approx(200_000 * 336)
        assert result.money_saved == pytest.approx(200_000 * 336 * 0.1)


class TestRosi:
    """ROSI ratio and its undefined variant."""

    def test_zero_cost_is_undefined(self):
        rosi = return_on_security_investment(100, 50, 10, 0)
        assert rosi.is_undefined
        assert rosi == Rosi.undefined()
        assert str(rosi) == "inf"
        assert rosi.as_percent() is None

    def test_finite(self):
        rosi = return_on_security_investment(1_000, 400, 100, 200)
        assert not rosi.is_undefined
        assert rosi.ratio == pytest.approx((600 + 100 - 200) / 200)
        assert str(rosi) == "250.0%"
        assert rosi.as_percent() == pytest.approx(250.0)

    def test_can_be_negative(self):
        rosi = return_on_security_investment(100, 90, 0, 1_000)
        assert rosi.ratio < 0

    def test_zero_cost_input_gives_undefined(self, tables):
        result = compute_all(
            CalculationInput(sector="Healthcare", strategy="Cold Site", include_dr_cost=False),
            tables,
        )
        assert result.rosi_cost == 0
        assert result.rosi.is_undefined
        assert result.to_dict()["rosi"] is None

    def test_excluding_dr_lowers_cost_basis(self, tables, finance_input):
        for strategy in tables.strategy_names():
            inc = compute_all(replace(finance_input, strategy=strategy), tables)
            exc = compute_all(replace(finance_input, strategy=strategy, include_dr_cost=False), tables)
            assert exc.rosi_cost <= inc.rosi_cost
            assert inc.rosi_cost - exc.rosi_cost == tables.strategy(strategy).annual_cost
            # benefit side is unchanged
            assert exc.money_saved == inc.money_saved
            assert exc.total_control_cost == inc.total_control_cost

    def test_succession_cost_counted(self, tables, finance_input):
        result = compute_all(replace(finance_input, succession=True), tables)
        assert result.total_control_cost == 50_000 + 25_000 + 7_500 + 5_000


class TestComputeAll:
    """End-to-end scenario and input handling."""

    def test_finance_warm_site_scenario(self, tables, finance_input):
        r = compute_all(finance_input, tables)
        assert r.loss_magnitude == 6_080_000
        assert r.sle == pytest.approx(500_000)
        assert r.ale_pre == pytest.approx(608_000)
        assert r.ale_post == pytest.approx(243_200)
        assert r.downtime_baseline == pytest.approx(1_881_600_000)
        assert r.downtime_selected == pytest.approx(268_800_000)
        assert r.money_saved == pytest.approx(1_612_800_000)
        assert r.total_control_cost == 82_500
        assert r.rosi_cost == 82_500
        expected = ((608_000 - 243_200) + 1_612_800_000 - 82_500) / 82_500
        assert r.rosi.ratio == pytest.approx(expected)

    def test_asset_value_used_when_no_breach_cost(self):
        tables = ReferenceTables(
            sectors={"Startup": SectorProfile(0.5, 0.0, 1_000.0)},
            strategies={"Cold Site": COLD},
            control_costs=ControlCostTable(),
        )
        r = compute_all(CalculationInput(sector="Startup", asset_value=200_000, exposure_factor=10), tables)
        assert r.loss_magnitude == 200_000
        assert r.ale_pre == pytest.approx(200_000 * 0.1 * 0.5)

    def test_inputs_are_normalized(self, tables):
        r = compute_all(
            CalculationInput(sector="Retail", asset_value=-10, exposure_factor=400), tables
        )
        assert r.inputs.asset_value == 0
        assert r.inputs.exposure_factor == 100
        assert r.sle == 0

    def test_non_numeric_inputs_default_to_zero(self, tables):
        r = compute_all(
            CalculationInput(sector="Retail", asset_value=None, exposure_factor="n/a"), tables
        )
        assert r.inputs.asset_value == 0
        assert r.inputs.exposure_factor == 0
        assert r.ale_pre == 0

    @pytest.mark.parametrize("asset", ["inf", float("inf"), 10**400])
    def test_unrepresentable_asset_value_defaults_to_zero(self, tables, asset):
        r = compute_all(
            CalculationInput(sector="Retail", asset_value=asset, exposure_factor=0), tables
        )
        assert r.inputs.asset_value == 0
        assert r.sle == 0
        assert not math.isnan(r.sle)

    def test_out_of_range_reference_values_are_clamped(self):
        tables = ReferenceTables(
            sectors={"Volatile": SectorProfile(1.5, 1_000_000.0, -500.0)},
            strategies={
                "Cold Site": DrStrategy(336.0, -10_000.0),
                "Warm Site": DrStrategy(-48.0, 50_000.0),
            },
            control_costs=ControlCostTable(mfa=-25_000.0, phishing=7_500.0, succession=5_000.0),
        )
        r = compute_all(
            CalculationInput(
                sector="Volatile", asset_value=1_000_000, exposure_factor=100,
                mfa=True, strategy="Warm Site",
            ),
            tables,
        )
        assert tables.sector("Volatile").annual_rate_of_occurrence == 1.0
        assert r.ale_pre == pytest.approx(1_000_000)
        assert r.ale_pre <= r.loss_magnitude
        assert r.downtime_baseline == 0
        assert r.downtime_selected == 0
        assert r.money_saved == 0
        assert r.total_control_cost == 50_000
        for value in (r.sle, r.ale_pre, r.ale_post, r.total_control_cost, r.rosi_cost):
            assert value >= 0

    def test_unknown_sector_raises(self, tables):
        with pytest.raises(InvalidReference) as excinfo:
            compute_all(CalculationInput(sector="Aerospace"), tables)
        assert excinfo.value.kind == "sector"
        assert "Finance" in excinfo.value.known

    def test_unknown_strategy_raises(self, tables):
        with pytest.raises(InvalidReference):
            compute_all(CalculationInput(sector="Finance", strategy="Moon Base"), tables)

    def test_to_dict_echoes_inputs(self, tables, finance_input):
        data = compute_all(finance_input, tables).to_dict()
        assert data["sector"] == "Finance"
        assert data["strategy"] == "Warm Site"
        assert data["rosi"] == pytest.approx(compute_all(finance_input, tables).rosi.ratio)
