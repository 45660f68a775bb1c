"""Year-specific parameters for the §32a EStG income tax formula."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, model_validator


class TaxYearParams(BaseModel):
    """Bracket thresholds and formula coefficients for one Veranlagungszeitraum.

    Zone 2 is ``(zone2_a * y + zone2_b) * y`` with ``y = (zvE - grundfreibetrag) / 10000``.
    Zone 3 is ``(zone3_a * z + zone3_b) * z + zone3_c`` with ``z = (zvE - zone2_upper) / 10000``.
    Zones 4 and 5 are linear: ``rate * zvE - sub``.
    """

    model_config = ConfigDict(frozen=True)

    year: int

    # Zone boundaries (zvE in EUR)
    grundfreibetrag: Decimal
    zone2_upper: Decimal
    zone3_upper: Decimal
    zone4_upper: Decimal

    zone2_a: Decimal
    zone2_b: Decimal
    zone3_a: Decimal
    zone3_b: Decimal
    zone3_c: Decimal
    zone4_rate: Decimal
    zone4_sub: Decimal
    zone5_rate: Decimal
    zone5_sub: Decimal

    # Solidaritaetszuschlag
    soli_rate: Decimal
    soli_exemption: Decimal
    soli_milderungs_rate: Decimal

    # Flat deductions
    werbungskostenpauschale: Decimal
    sonderausgabenpauschale: Decimal

    @model_validator(mode="after")
    def _check_boundaries(self) -> "TaxYearParams":
        bounds = [
            Decimal("0"),
            self.grundfreibetrag,
            self.zone2_upper,
            self.zone3_upper,
            self.zone4_upper,
        ]
        for lower, upper in zip(bounds, bounds[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Zone boundaries for {self.year} must be strictly increasing: {upper} <= {lower}"
                )
        return self
