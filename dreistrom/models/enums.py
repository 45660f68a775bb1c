"""Enumerations for Dreistrom."""

from enum import StrEnum


class IncomeStream(StrEnum):
    EMPLOYMENT = "EMPLOYMENT"
    FREIBERUF = "FREIBERUF"
    GEWERBE = "GEWERBE"

    @property
    def is_self_employed(self) -> bool:
        return self is not IncomeStream.EMPLOYMENT


class ThresholdType(StrEnum):
    KLEINUNTERNEHMER_CURRENT_YEAR = "KLEINUNTERNEHMER_CURRENT_YEAR"
    KLEINUNTERNEHMER_PROJECTED = "KLEINUNTERNEHMER_PROJECTED"
    ABFAERBUNG = "ABFAERBUNG"
    GEWERBESTEUER_FREIBETRAG = "GEWERBESTEUER_FREIBETRAG"
    BILANZIERUNG = "BILANZIERUNG"
    MANDATORY_FILING = "MANDATORY_FILING"
