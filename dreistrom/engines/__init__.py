"""Tax computation engines."""

from dreistrom.engines.depreciation import DepreciationCalculator
from dreistrom.engines.gewerbesteuer import GewerbesteuerCalculator
from dreistrom.engines.income_tax import IncomeTaxCalculator
from dreistrom.engines.projector import AnnualProjector
from dreistrom.engines.vat import VatConverter

__all__ = [
    "AnnualProjector",
    "DepreciationCalculator",
    "GewerbesteuerCalculator",
    "IncomeTaxCalculator",
    "VatConverter",
]
