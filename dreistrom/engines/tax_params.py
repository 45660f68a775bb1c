"""Income tax parameter tables.

§32a EStG zone boundaries and coefficients, Solidaritaetszuschlag limits and
flat deductions, keyed by Veranlagungszeitraum. Never hardcode these in
computation functions.

Sources:
  - 2024: §32a EStG as originally enacted for VZ 2024 (Grundfreibetrag 11,604)
  - 2025: §32a EStG, Steuerfortentwicklungsgesetz
  - 2026: §32a EStG, Steuerfortentwicklungsgesetz
"""

import logging
from decimal import Decimal

from dreistrom.exceptions import UnsupportedTaxYearError
from dreistrom.models.tax_year import TaxYearParams

logger = logging.getLogger(__name__)

TAX_YEAR_PARAMS: dict[int, TaxYearParams] = {
    2024: TaxYearParams(
        year=2024,
        grundfreibetrag=Decimal("11604"),
        zone2_upper=Decimal("17005"),
        zone3_upper=Decimal("66760"),
        zone4_upper=Decimal("277825"),
        zone2_a=Decimal("922.98"),
        zone2_b=Decimal("1400"),
        zone3_a=Decimal("181.19"),
        zone3_b=Decimal("2397"),
        zone3_c=Decimal("1025.38"),
        zone4_rate=Decimal("0.42"),
        zone4_sub=Decimal("10602.13"),
        zone5_rate=Decimal("0.45"),
        zone5_sub=Decimal("18936.88"),
        soli_rate=Decimal("0.055"),
        soli_exemption=Decimal("18130"),
        soli_milderungs_rate=Decimal("0.119"),
        werbungskostenpauschale=Decimal("1230"),
        sonderausgabenpauschale=Decimal("36"),
    ),
    2025: TaxYearParams(
        year=2025,
        grundfreibetrag=Decimal("12096"),
        zone2_upper=Decimal("17443"),
        zone3_upper=Decimal("68480"),
        zone4_upper=Decimal("277825"),
        zone2_a=Decimal("932.30"),
        zone2_b=Decimal("1400"),
        zone3_a=Decimal("176.64"),
        zone3_b=Decimal("2397"),
        zone3_c=Decimal("1015.13"),
        zone4_rate=Decimal("0.42"),
        zone4_sub=Decimal("10911.92"),
        zone5_rate=Decimal("0.45"),
        zone5_sub=Decimal("19246.67"),
        soli_rate=Decimal("0.055"),
        soli_exemption=Decimal("19950"),
        soli_milderungs_rate=Decimal("0.119"),
        werbungskostenpauschale=Decimal("1230"),
        sonderausgabenpauschale=Decimal("36"),
    ),
    2026: TaxYearParams(
        year=2026,
        grundfreibetrag=Decimal("12348"),
        zone2_upper=Decimal("17799"),
        zone3_upper=Decimal("69878"),
        zone4_upper=Decimal("277825"),
        zone2_a=Decimal("914.51"),
        zone2_b=Decimal("1400"),
        zone3_a=Decimal("173.10"),
        zone3_b=Decimal("2397"),
        zone3_c=Decimal("1034.87"),
        zone4_rate=Decimal("0.42"),
        zone4_sub=Decimal("11135.63"),
        zone5_rate=Decimal("0.45"),
        zone5_sub=Decimal("19470.38"),
        soli_rate=Decimal("0.055"),
        soli_exemption=Decimal("20350"),
        soli_milderungs_rate=Decimal("0.119"),
        werbungskostenpauschale=Decimal("1230"),
        sonderausgabenpauschale=Decimal("36"),
    ),
}


def latest_known_year(table: dict[int, TaxYearParams] | None = None) -> int:
    table = TAX_YEAR_PARAMS if table is None else table
    if not table:
        raise UnsupportedTaxYearError(0)
    return max(table)


def params_for_year(
    year: int, table: dict[int, TaxYearParams] | None = None
) -> TaxYearParams:
    """Resolve parameters for a tax year.

    Years without their own entry use the most recent known year. Only an
    empty table is an error.
    """
    table = TAX_YEAR_PARAMS if table is None else table
    params = table.get(year)
    if params is not None:
        return params
    if not table:
        raise UnsupportedTaxYearError(year)
    fallback = latest_known_year(table)
    logger.info("No tax parameters for %d, falling back to %d", year, fallback)
    return table[fallback]
