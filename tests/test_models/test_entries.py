"""Tests for ledger record models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from dreistrom.models.entries import AllocationRule, IncomeEntry
from dreistrom.models.enums import IncomeStream


class TestAllocationRule:
    def test_must_sum_to_100(self):
        with pytest.raises(ValidationError, match="sum to 100"):
            AllocationRule(freiberuf_pct=50, gewerbe_pct=30)

    def test_pct_for_stream(self):
        rule = AllocationRule(freiberuf_pct=60, gewerbe_pct=30, personal_pct=10)
        assert rule.pct_for(IncomeStream.FREIBERUF) == 60
        assert rule.pct_for(IncomeStream.GEWERBE) == 30
        assert rule.pct_for(IncomeStream.EMPLOYMENT) == 0


class TestIncomeEntry:
    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            IncomeEntry(
                user_id=1,
                stream=IncomeStream.FREIBERUF,
                amount=Decimal("-1"),
                entry_date=date(2026, 1, 1),
            )

    def test_stream_from_string(self):
        entry = IncomeEntry(user_id=1, stream="GEWERBE", amount=Decimal("1"), entry_date=date(2026, 1, 1))
        assert entry.stream is IncomeStream.GEWERBE
        assert entry.stream.is_self_employed
        assert not IncomeStream.EMPLOYMENT.is_self_employed
