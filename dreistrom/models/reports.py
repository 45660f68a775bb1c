"""Calculation result models."""

from decimal import Decimal

from pydantic import BaseModel


class DeductionBreakdown(BaseModel):
    freiberuf_expenses: Decimal
    gewerbe_expenses: Decimal
    werbungskostenpauschale: Decimal
    sonderausgabenpauschale: Decimal
    total: Decimal


class TaxAssessment(BaseModel):
    year: int
    # Income
    employment_income: Decimal
    freiberuf_income: Decimal
    gewerbe_income: Decimal
    total_gross: Decimal
    # Deductions
    deductions: DeductionBreakdown
    taxable_income: Decimal
    # Tax
    income_tax: Decimal
    solidarity_surcharge: Decimal
    total_tax: Decimal
    marginal_rate: Decimal
    effective_rate: Decimal


class GewerbesteuerResult(BaseModel):
    profit: Decimal
    freibetrag: Decimal
    taxable_profit: Decimal
    steuermesszahl: Decimal
    messbetrag: Decimal
    hebesatz: int
    gewerbesteuer: Decimal
    paragraph_35_credit: Decimal
    net_burden: Decimal


class KleinunternehmerStatus(BaseModel):
    """Where a user stands against both §19 UStG revenue limits."""

    year: int
    current_revenue: Decimal
    current_year_limit: Decimal
    current_ratio: Decimal
    projected_revenue: Decimal
    projected_year_limit: Decimal
    projected_ratio: Decimal
    current_exceeded: bool
    projected_exceeded: bool


class VatSummary(BaseModel):
    output_vat: Decimal
    freiberuf_output_vat: Decimal
    gewerbe_output_vat: Decimal
    input_vat: Decimal
    freiberuf_input_vat: Decimal
    gewerbe_input_vat: Decimal
    # Negative when input VAT exceeds output VAT (refund)
    net_payable: Decimal
    kleinunternehmer: bool

    @classmethod
    def zero(cls) -> "VatSummary":
        """Summary for a Kleinunternehmer: no VAT is charged or reclaimed."""
        nothing = Decimal("0.00")
        return cls(
            output_vat=nothing,
            freiberuf_output_vat=nothing,
            gewerbe_output_vat=nothing,
            input_vat=nothing,
            freiberuf_input_vat=nothing,
            gewerbe_input_vat=nothing,
            net_payable=nothing,
            kleinunternehmer=True,
        )


class TaxReserveRecommendation(BaseModel):
    year: int
    net_profit: Decimal
    reserve_rate: Decimal
    monthly_reserve: Decimal
    annual_reserve: Decimal
    already_reserved: Decimal
    remaining: Decimal
    months_remaining: int


class PrepaymentAdjustment(BaseModel):
    """Whether the projected income has drifted far enough from the
    Vorauszahlung assessment basis to request an adjustment."""

    recommended: bool
    projected_income: Decimal
    assessment_basis: Decimal
    deviation_percent: Decimal
    suggested_quarterly: Decimal

    @classmethod
    def none(cls) -> "PrepaymentAdjustment":
        nothing = Decimal("0.00")
        return cls(
            recommended=False,
            projected_income=nothing,
            assessment_basis=nothing,
            deviation_percent=nothing,
            suggested_quarterly=nothing,
        )
