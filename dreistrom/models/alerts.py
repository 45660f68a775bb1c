"""Threshold alert event."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from dreistrom.models.enums import ThresholdType


class ThresholdAlert(BaseModel):
    """Emitted when a statutory threshold is crossed or approached.

    ``ratio`` is the observed value relative to the limit (4 decimals) and
    ``reference_amount`` the EUR figure the rule compared.
    """

    model_config = ConfigDict(frozen=True)

    type: ThresholdType
    ratio: Decimal
    reference_amount: Decimal
    user_id: int
    year: int
    occurred_at: datetime
