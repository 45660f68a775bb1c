"""Custom exceptions for Dreistrom."""

from datetime import date


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class DataValidationError(TaxComputationError):
    """Raised when input data fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")


class UnsupportedTaxYearError(TaxComputationError):
    """Raised when no tax parameters exist for a year and no fallback is available."""

    def __init__(self, year: int):
        self.year = year
        super().__init__(f"No tax parameters available for year {year}")


class AssetAlreadyDisposedError(TaxComputationError):
    """Raised when disposing an asset that already has a disposal date."""

    def __init__(self, asset_id: int | None, disposal_date: date):
        self.asset_id = asset_id
        self.disposal_date = disposal_date
        super().__init__(
            f"Asset {asset_id} already disposed on {disposal_date.isoformat()}"
        )


class ProjectionUnavailableError(TaxComputationError):
    """Raised when a full-year projection is requested for a year that has not started."""

    def __init__(self, year: int, today: date):
        self.year = year
        self.today = today
        super().__init__(
            f"Cannot project year {year}: it has not started (today is {today.isoformat()})"
        )


class RecordNotFoundError(TaxComputationError):
    """Raised when a referenced ledger record does not exist."""

    def __init__(self, record_type: str, record_id: int):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} not found: {record_id}")
