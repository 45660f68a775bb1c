"""Umsatzsteuer summary for a reporting period.

Output VAT is extracted from the self-employed income entries, which are
recorded gross. Input VAT is extracted from the business expenses allocated
to the Freiberuf and Gewerbe streams at the standard rate; employment and
private expenses carry no input VAT deduction. A Kleinunternehmer neither
charges nor reclaims VAT, so every figure is zero.
"""

from datetime import date
from decimal import Decimal

from dreistrom.config import EngineSettings
from dreistrom.engines.vat import STANDARD_RATE, VatConverter
from dreistrom.exceptions import DataValidationError
from dreistrom.models.enums import IncomeStream
from dreistrom.models.reports import VatSummary
from dreistrom.monitoring.aggregator import RevenueAggregator
from dreistrom.money import from_cents

BUSINESS_STREAMS = (IncomeStream.FREIBERUF, IncomeStream.GEWERBE)


class VatSummaryCalculator:
    def __init__(
        self,
        aggregator: RevenueAggregator,
        settings: EngineSettings | None = None,
        converter: VatConverter | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.settings = settings or EngineSettings()
        self.converter = converter or VatConverter()

    def calculate(
        self,
        user_id: int,
        start: date,
        end: date,
        kleinunternehmer: bool = False,
    ) -> VatSummary:
        """Output VAT, input VAT and the net amount payable for ``start``..``end``."""
        if end < start:
            raise DataValidationError("end", f"period end {end} is before start {start}")
        if kleinunternehmer:
            return VatSummary.zero()

        output: dict[IncomeStream, Decimal] = {}
        input_: dict[IncomeStream, Decimal] = {}
        for stream in BUSINESS_STREAMS:
            revenue = from_cents(self.aggregator.sum_revenue_cents(user_id, stream, start, end))
            expenses = from_cents(self.aggregator.sum_expense_cents(user_id, stream, start, end))
            output[stream] = self.converter.extract_vat(revenue, self.settings.vat_output_rate)
            input_[stream] = self.converter.extract_vat(expenses, STANDARD_RATE)

        output_vat = sum(output.values(), Decimal("0.00"))
        input_vat = sum(input_.values(), Decimal("0.00"))
        return VatSummary(
            output_vat=output_vat,
            freiberuf_output_vat=output[IncomeStream.FREIBERUF],
            gewerbe_output_vat=output[IncomeStream.GEWERBE],
            input_vat=input_vat,
            freiberuf_input_vat=input_[IncomeStream.FREIBERUF],
            gewerbe_input_vat=input_[IncomeStream.GEWERBE],
            net_payable=output_vat - input_vat,
            kleinunternehmer=False,
        )
