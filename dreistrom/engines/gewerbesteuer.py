"""Gewerbesteuer (trade tax) on Gewerbe profits.

  1. Gewerbeertrag = Gewerbe income - Gewerbe expenses (floored at 0)
  2. Taxable = max(0, Gewerbeertrag - Freibetrag)
  3. Steuermessbetrag = Taxable x Steuermesszahl (3.5%)
  4. Gewerbesteuer = Steuermessbetrag x Hebesatz / 100
  5. §35 EStG credit = min(4.0 x Steuermessbetrag, income tax)
  6. Net burden = Gewerbesteuer - credit (floored at 0)
"""

from decimal import Decimal

from dreistrom.config import EngineSettings
from dreistrom.models.reports import GewerbesteuerResult
from dreistrom.money import HUNDRED, ZERO, round_money

STEUERMESSZAHL = Decimal("0.035")
PARAGRAPH_35_FACTOR = Decimal("4.0")


class GewerbesteuerCalculator:
    """Computes trade tax and the §35 EStG income tax credit."""

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or EngineSettings()

    def compute(
        self,
        gewerbe_income: Decimal,
        gewerbe_expenses: Decimal,
        income_tax: Decimal,
        hebesatz: int | None = None,
    ) -> GewerbesteuerResult:
        hebesatz = hebesatz if hebesatz is not None else self.settings.hebesatz
        freibetrag = self.settings.gewerbesteuer_freibetrag

        profit = max(gewerbe_income - gewerbe_expenses, ZERO)
        taxable_profit = max(profit - freibetrag, ZERO)

        messbetrag = round_money(taxable_profit * STEUERMESSZAHL)
        gewerbesteuer = round_money(messbetrag * Decimal(hebesatz) / HUNDRED)

        max_credit = round_money(PARAGRAPH_35_FACTOR * messbetrag)
        credit = min(max_credit, max(income_tax, ZERO))
        net_burden = max(gewerbesteuer - credit, ZERO)

        return GewerbesteuerResult(
            profit=round_money(profit),
            freibetrag=freibetrag,
            taxable_profit=round_money(taxable_profit),
            steuermesszahl=STEUERMESSZAHL,
            messbetrag=messbetrag,
            hebesatz=hebesatz,
            gewerbesteuer=gewerbesteuer,
            paragraph_35_credit=round_money(credit),
            net_burden=round_money(net_burden),
        )
