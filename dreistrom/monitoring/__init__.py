"""Reactive threshold monitoring."""

from dreistrom.monitoring.aggregator import IncomeEntrySource, RevenueAggregator, YearAggregates
from dreistrom.monitoring.dispatcher import (
    AlertDispatcher,
    CooldownAlertDispatcher,
    LoggingAlertDispatcher,
    RecordingAlertDispatcher,
    with_cooldown,
)
from dreistrom.monitoring.monitor import ThresholdMonitor

__all__ = [
    "AlertDispatcher",
    "CooldownAlertDispatcher",
    "IncomeEntrySource",
    "LoggingAlertDispatcher",
    "RecordingAlertDispatcher",
    "RevenueAggregator",
    "ThresholdMonitor",
    "YearAggregates",
    "with_cooldown",
]
