"""Tests for the §32a EStG income tax formula and the full assessment."""

from decimal import Decimal

import pytest

from dreistrom.engines.income_tax import IncomeTaxCalculator, compute_tax
from dreistrom.engines.tax_params import TAX_YEAR_PARAMS
from dreistrom.exceptions import DataValidationError


@pytest.fixture
def calc() -> IncomeTaxCalculator:
    return IncomeTaxCalculator()


class TestComputeTax:
    def test_zero_income(self, calc):
        assert calc.compute_tax(Decimal("0"), 2024) == Decimal("0.00")

    def test_grundfreibetrag_is_tax_free(self, calc):
        assert calc.compute_tax(Decimal("11604"), 2024) == Decimal("0.00")

    def test_zone2_upper_boundary(self, calc):
        assert calc.compute_tax(Decimal("17005"), 2024) == Decimal("1025.38")

    def test_zone4(self, calc):
        assert calc.compute_tax(Decimal("100000"), 2024) == Decimal("31397.87")

    def test_zone5(self, calc):
        assert calc.compute_tax(Decimal("300000"), 2024) == Decimal("116063.12")

    def test_year_specific_coefficients(self, calc):
        assert calc.compute_tax(Decimal("100000"), 2025) == Decimal("31088.08")

    def test_accepts_params_instance(self, calc):
        assert calc.compute_tax(Decimal("100000"), TAX_YEAR_PARAMS[2024]) == Decimal("31397.87")

    def test_negative_income_rejected(self, calc):
        with pytest.raises(DataValidationError):
            calc.compute_tax(Decimal("-1"), 2024)

    def test_two_decimal_result(self, calc):
        result = calc.compute_tax(Decimal("45678"), 2024)
        assert result == result.quantize(Decimal("0.01"))

    def test_module_level_function(self):
        assert compute_tax(Decimal("100000"), 2024) == Decimal("31397.87")


class TestFormulaProperties:
    @pytest.mark.parametrize("year", [2024, 2025, 2026])
    def test_non_decreasing_across_boundaries_in_cent_steps(self, calc, year):
        params = TAX_YEAR_PARAMS[year]
        step = Decimal("0.01")
        for boundary in (params.grundfreibetrag, params.zone2_upper, params.zone3_upper, params.zone4_upper):
            zve = boundary - 2
            previous = calc.compute_tax(zve, year)
            while zve < boundary + 2:
                zve += step
                tax = calc.compute_tax(zve, year)
                assert tax >= previous, f"{year}: tax({zve}) = {tax} < {previous}"
                previous = tax

    @pytest.mark.parametrize("year", [2024, 2025, 2026])
    def test_non_decreasing_across_boundaries_in_euro_steps(self, calc, year):
        params = TAX_YEAR_PARAMS[year]
        for boundary in (params.grundfreibetrag, params.zone2_upper, params.zone3_upper, params.zone4_upper):
            previous = calc.compute_tax(boundary - 50, year)
            for offset in range(-49, 51):
                tax = calc.compute_tax(boundary + offset, year)
                assert tax >= previous, f"{year}: tax({boundary + offset}) = {tax} < {previous}"
                previous = tax

    def test_cents_truncated_before_tariff(self, calc):
        assert calc.compute_tax(Decimal("66760.99"), 2024) == Decimal("17437.12")
        assert calc.compute_tax(Decimal("66760.01"), 2024) == calc.compute_tax(Decimal("66760"), 2024)
        assert calc.compute_tax(Decimal("66761"), 2024) == Decimal("17437.49")

    def test_zone3_to_zone4_step_2025(self, calc):
        assert calc.compute_tax(Decimal("68480.99"), 2025) == Decimal("17849.77")
        assert calc.compute_tax(Decimal("68481"), 2025) == Decimal("17850.10")

    def test_marginal_rate_uses_whole_euros(self, calc):
        assert calc.compute_marginal_rate(Decimal("66760.50"), 2024) == calc.compute_marginal_rate(
            Decimal("66760"), 2024
        )

    def test_zone3_to_zone4_transition(self, calc):
        params = TAX_YEAR_PARAMS[2024]
        zone3_value = calc.compute_tax(params.zone3_upper, 2024)
        zone4_value = params.zone4_rate * params.zone3_upper - params.zone4_sub
        assert zone3_value == Decimal("17437.12")
        assert abs(zone3_value - zone4_value) < Decimal("1")

    def test_never_negative(self, calc):
        for zve in (Decimal("0"), Decimal("0.01"), Decimal("11604.99")):
            assert calc.compute_tax(zve, 2024) >= 0


class TestMarginalRate:
    def test_below_grundfreibetrag(self, calc):
        assert calc.compute_marginal_rate(Decimal("10000"), 2024) == Decimal("0.00")

    def test_zone2_entry_rate_is_14_percent(self, calc):
        assert calc.compute_marginal_rate(Decimal("11605"), 2024) == Decimal("14.00")

    def test_zone4(self, calc):
        assert calc.compute_marginal_rate(Decimal("100000"), 2024) == Decimal("42.00")

    def test_zone5(self, calc):
        assert calc.compute_marginal_rate(Decimal("300000"), 2024) == Decimal("45.00")


class TestAssess:
    def test_freiberuf_only(self, calc):
        result = calc.assess(
            2024,
            freiberuf_income=Decimal("50000"),
            freiberuf_expenses=Decimal("10000"),
        )
        assert result.taxable_income == Decimal("39964")
        assert result.deductions.werbungskostenpauschale == Decimal("0")
        assert result.deductions.sonderausgabenpauschale == Decimal("36")
        assert result.income_tax == calc.compute_tax(Decimal("39964"), 2024)
        assert result.solidarity_surcharge == Decimal("0.00")
        assert result.total_tax == result.income_tax

    def test_employment_gets_werbungskostenpauschale(self, calc):
        result = calc.assess(2024, employment_income=Decimal("40000"))
        assert result.deductions.werbungskostenpauschale == Decimal("1230")
        assert result.taxable_income == Decimal("38734")

    def test_zve_truncated_to_whole_euros(self, calc):
        result = calc.assess(2024, freiberuf_income=Decimal("20036.99"))
        assert result.taxable_income == Decimal("20000")

    def test_deductions_exceeding_income_floor_at_zero(self, calc):
        result = calc.assess(
            2024,
            gewerbe_income=Decimal("5000"),
            gewerbe_expenses=Decimal("9000"),
        )
        assert result.taxable_income == Decimal("0")
        assert result.total_tax == Decimal("0.00")
        assert result.effective_rate == Decimal("0.00")

    def test_effective_rate(self, calc):
        result = calc.assess(2024, freiberuf_income=Decimal("100036"))
        expected = (result.total_tax * 100 / Decimal("100036")).quantize(Decimal("0.01"))
        assert result.effective_rate == expected

    def test_surcharge_applied_for_high_income(self, calc):
        result = calc.assess(2024, freiberuf_income=Decimal("200000"))
        assert result.solidarity_surcharge > 0
        assert result.total_tax == result.income_tax + result.solidarity_surcharge
