"""Data models for Dreistrom."""

from dreistrom.models.alerts import ThresholdAlert
from dreistrom.models.assets import (
    DepreciationAsset,
    DepreciationYearEntry,
    StreamDepreciationSummary,
)
from dreistrom.models.entries import AllocationRule, ExpenseEntry, IncomeEntry
from dreistrom.models.enums import IncomeStream, ThresholdType
from dreistrom.models.events import (
    DomainEvent,
    ExpenseEntryCreated,
    IncomeEntryCreated,
    IncomeEntryModified,
)
from dreistrom.models.reports import (
    DeductionBreakdown,
    GewerbesteuerResult,
    KleinunternehmerStatus,
    PrepaymentAdjustment,
    TaxAssessment,
    TaxReserveRecommendation,
    VatSummary,
)
from dreistrom.models.tax_year import TaxYearParams

__all__ = [
    "AllocationRule",
    "DeductionBreakdown",
    "DepreciationAsset",
    "DepreciationYearEntry",
    "DomainEvent",
    "ExpenseEntry",
    "ExpenseEntryCreated",
    "GewerbesteuerResult",
    "IncomeEntry",
    "IncomeEntryCreated",
    "IncomeEntryModified",
    "IncomeStream",
    "KleinunternehmerStatus",
    "PrepaymentAdjustment",
    "StreamDepreciationSummary",
    "TaxAssessment",
    "TaxReserveRecommendation",
    "TaxYearParams",
    "ThresholdAlert",
    "ThresholdType",
    "VatSummary",
]
