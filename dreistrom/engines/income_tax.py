"""Progressive income tax (§32a EStG) and Solidaritaetszuschlag (§5 SolZG).

All intermediate terms are carried at 10 fractional digits; results are
rounded to cents HALF_UP. The calculator holds no year-specific literals;
every coefficient comes from a TaxYearParams instance.
"""

from decimal import ROUND_DOWN, Decimal

from dreistrom.engines.tax_params import params_for_year
from dreistrom.exceptions import DataValidationError
from dreistrom.models.reports import DeductionBreakdown, TaxAssessment
from dreistrom.models.tax_year import TaxYearParams
from dreistrom.money import FORMULA_PLACES, HUNDRED, ZERO, round_money

TEN_THOUSAND = Decimal("10000")
ONE_EURO = Decimal("1")


def _resolve(year_or_params: int | TaxYearParams) -> TaxYearParams:
    if isinstance(year_or_params, TaxYearParams):
        return year_or_params
    return params_for_year(year_or_params)


def _whole_euros(amount: Decimal) -> Decimal:
    # §32a Abs. 1 S. 1: zvE is truncated to full euros before the tariff applies
    return amount.quantize(ONE_EURO, rounding=ROUND_DOWN)


class IncomeTaxCalculator:
    """Evaluates the five-zone income tax formula and the solidarity surcharge."""

    def compute_tax(
        self, taxable_income: Decimal, year: int | TaxYearParams
    ) -> Decimal:
        """Income tax on a taxable income (zvE) in EUR.

        Cents are dropped before the tariff is applied, so the result is
        non-decreasing in zvE across every zone boundary.
        """
        if taxable_income < 0:
            raise DataValidationError("taxable_income", "must not be negative")
        params = _resolve(year)
        zve = _whole_euros(taxable_income)

        if zve <= params.grundfreibetrag:
            return round_money(ZERO)

        if zve <= params.zone2_upper:
            y = ((zve - params.grundfreibetrag) / TEN_THOUSAND).quantize(FORMULA_PLACES)
            tax = (params.zone2_a * y + params.zone2_b) * y
        elif zve <= params.zone3_upper:
            z = ((zve - params.zone2_upper) / TEN_THOUSAND).quantize(FORMULA_PLACES)
            tax = (params.zone3_a * z + params.zone3_b) * z + params.zone3_c
        elif zve <= params.zone4_upper:
            tax = params.zone4_rate * zve - params.zone4_sub
        else:
            tax = params.zone5_rate * zve - params.zone5_sub

        return round_money(max(tax, ZERO))

    def compute_surcharge(
        self, income_tax: Decimal, year: int | TaxYearParams
    ) -> Decimal:
        """Solidaritaetszuschlag on a computed income tax.

        Zero up to the exemption; above it the glide-zone cap
        ``milderungs_rate * (tax - exemption)`` applies until the regular
        ``soli_rate * tax`` is smaller.
        """
        params = _resolve(year)
        if income_tax <= params.soli_exemption:
            return round_money(ZERO)

        full = round_money(income_tax * params.soli_rate)
        capped = round_money((income_tax - params.soli_exemption) * params.soli_milderungs_rate)
        return min(full, capped)

    def compute_marginal_rate(
        self, taxable_income: Decimal, year: int | TaxYearParams
    ) -> Decimal:
        """Marginal rate in percent at the top euro of zvE."""
        params = _resolve(year)
        zve = _whole_euros(taxable_income)

        if zve <= params.grundfreibetrag:
            return round_money(ZERO)
        if zve <= params.zone2_upper:
            # d/dzvE of (a*y + b)*y = (2a*y + b) / 10000
            y = ((zve - params.grundfreibetrag) / TEN_THOUSAND).quantize(FORMULA_PLACES)
            slope = (2 * params.zone2_a * y + params.zone2_b) / TEN_THOUSAND
        elif zve <= params.zone3_upper:
            z = ((zve - params.zone2_upper) / TEN_THOUSAND).quantize(FORMULA_PLACES)
            slope = (2 * params.zone3_a * z + params.zone3_b) / TEN_THOUSAND
        elif zve <= params.zone4_upper:
            slope = params.zone4_rate
        else:
            slope = params.zone5_rate
        return round_money(slope * HUNDRED)

    def assess(
        self,
        year: int,
        employment_income: Decimal = Decimal("0"),
        freiberuf_income: Decimal = Decimal("0"),
        gewerbe_income: Decimal = Decimal("0"),
        freiberuf_expenses: Decimal = Decimal("0"),
        gewerbe_expenses: Decimal = Decimal("0"),
    ) -> TaxAssessment:
        """Full income tax assessment across the three income streams.

        The Werbungskostenpauschale applies only when there is employment
        income; the Sonderausgabenpauschale always applies. zvE is truncated
        to whole euros and cannot go below zero.
        """
        params = params_for_year(year)
        total_gross = employment_income + freiberuf_income + gewerbe_income

        werbungskosten = params.werbungskostenpauschale if employment_income > 0 else ZERO
        sonderausgaben = params.sonderausgabenpauschale
        total_deductions = freiberuf_expenses + gewerbe_expenses + werbungskosten + sonderausgaben

        zve = _whole_euros(max(total_gross - total_deductions, ZERO))

        income_tax = self.compute_tax(zve, params)
        soli = self.compute_surcharge(income_tax, params)
        total_tax = income_tax + soli

        effective_rate = (
            round_money(total_tax * HUNDRED / total_gross) if total_gross > 0 else round_money(ZERO)
        )

        return TaxAssessment(
            year=year,
            employment_income=employment_income,
            freiberuf_income=freiberuf_income,
            gewerbe_income=gewerbe_income,
            total_gross=total_gross,
            deductions=DeductionBreakdown(
                freiberuf_expenses=freiberuf_expenses,
                gewerbe_expenses=gewerbe_expenses,
                werbungskostenpauschale=werbungskosten,
                sonderausgabenpauschale=sonderausgaben,
                total=total_deductions,
            ),
            taxable_income=zve,
            income_tax=income_tax,
            solidarity_surcharge=soli,
            total_tax=total_tax,
            marginal_rate=self.compute_marginal_rate(zve, params),
            effective_rate=effective_rate,
        )


_calculator = IncomeTaxCalculator()


def compute_tax(taxable_income: Decimal, year: int) -> Decimal:
    return _calculator.compute_tax(taxable_income, year)


def compute_surcharge(income_tax: Decimal, year: int) -> Decimal:
    return _calculator.compute_surcharge(income_tax, year)
