"""Engine settings: statutory thresholds and defaults.

Every limit the threshold rules compare against lives here so that a
deployment can override it from a JSON file without touching rule code.
"""

import logging
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    # §19 UStG Kleinunternehmer
    kleinunternehmer_current_year_limit: Decimal = Field(default=Decimal("22000"), gt=0)
    kleinunternehmer_projected_year_limit: Decimal = Field(default=Decimal("50000"), gt=0)
    warning_ratio: Decimal = Field(default=Decimal("0.80"), gt=0)

    # Abfaerbung (§15 Abs. 3 Nr. 1 EStG, BFH de-minimis limits)
    abfaerbung_ratio: Decimal = Decimal("0.03")
    abfaerbung_amount: Decimal = Decimal("24500")

    # Gewerbesteuer (§11 GewStG)
    gewerbesteuer_freibetrag: Decimal = Field(default=Decimal("24500"), gt=0)
    hebesatz: int = Field(default=410, ge=200)

    # Bilanzierungspflicht (§141 AO)
    bilanzierung_revenue: Decimal = Field(default=Decimal("800000"), gt=0)
    bilanzierung_profit: Decimal = Field(default=Decimal("80000"), gt=0)

    # Mandatory filing (§46 Abs. 2 Nr. 1 EStG)
    mandatory_filing_threshold: Decimal = Field(default=Decimal("410"), gt=0)

    # GWG (§6 Abs. 2 EStG) and default AfA useful life (BMF AfA-Tabelle, computer hardware)
    gwg_threshold: Decimal = Decimal("800.00")
    default_useful_life_months: int = Field(default=36, ge=1)

    # VAT summary: self-employed income entries are treated as gross at this rate
    vat_output_rate: Decimal = Field(default=Decimal("19"), ge=0)

    # Tax reserve share of net self-employed profit, in percent
    tax_reserve_rate: Decimal = Field(default=Decimal("30"), ge=0, le=100)

    # Vorauszahlung (§37 EStG): deviation from the assessment basis that warrants an adjustment request
    prepayment_deviation_percent: Decimal = Field(default=Decimal("25"), gt=0)

    # Alert deduplication window; None leaves deduplication to downstream consumers
    alert_cooldown_hours: int | None = Field(default=None, ge=1)


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load settings from a JSON file, or return defaults when no path is given."""
    if path is None:
        return EngineSettings()
    logger.info("Loading engine settings from %s", path)
    return EngineSettings.model_validate_json(path.read_text())
