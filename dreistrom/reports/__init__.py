"""Read-only reports over the ledger."""

from dreistrom.reports.kleinunternehmer import KleinunternehmerStatusService
from dreistrom.reports.reserve import PrepaymentChecker, TaxReserveCalculator
from dreistrom.reports.vat_summary import VatSummaryCalculator

__all__ = [
    "KleinunternehmerStatusService",
    "PrepaymentChecker",
    "TaxReserveCalculator",
    "VatSummaryCalculator",
]
