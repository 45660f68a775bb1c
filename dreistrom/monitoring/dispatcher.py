"""Alert dispatch boundary.

Notification delivery lives outside the engine. These dispatchers receive
ThresholdAlerts from the event bus: one logs, one records, and one
suppresses repeats of the same alert within a cool-down window.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from dreistrom.clock import Clock
from dreistrom.config import EngineSettings
from dreistrom.events import EventBus
from dreistrom.models.alerts import ThresholdAlert
from dreistrom.models.enums import ThresholdType

logger = logging.getLogger(__name__)


class AlertDispatcher(ABC):
    """Abstract base class for alert consumers."""

    @abstractmethod
    def dispatch(self, alert: ThresholdAlert) -> None:
        ...

    def connect(self, bus: EventBus) -> None:
        bus.subscribe(ThresholdAlert, self.dispatch)


class LoggingAlertDispatcher(AlertDispatcher):
    def dispatch(self, alert: ThresholdAlert) -> None:
        logger.info(
            "Threshold alert %s: ratio=%s, amount=%s EUR, userId=%s, year=%s",
            alert.type.value, alert.ratio, alert.reference_amount, alert.user_id, alert.year,
        )


class RecordingAlertDispatcher(AlertDispatcher):
    """Keeps every dispatched alert in memory, in arrival order."""

    def __init__(self) -> None:
        self.alerts: list[ThresholdAlert] = []

    def dispatch(self, alert: ThresholdAlert) -> None:
        self.alerts.append(alert)

    def of_type(self, type_: ThresholdType) -> list[ThresholdAlert]:
        return [a for a in self.alerts if a.type == type_]


class CooldownAlertDispatcher(AlertDispatcher):
    """Forwards an alert only if the same (user, year, type) was not forwarded within the window.

    Keys whose window has passed are evicted on every dispatch, so memory is
    bounded by the alerts seen in one window. Safe to share between threads;
    the inner dispatcher is called outside the lock.
    """

    def __init__(self, inner: AlertDispatcher, clock: Clock, window: timedelta) -> None:
        self.inner = inner
        self.clock = clock
        self.window = window
        self._last_sent: dict[tuple[int, int, ThresholdType], datetime] = {}
        self._lock = threading.Lock()

    @property
    def tracked_count(self) -> int:
        """Number of (user, year, type) keys still inside their window."""
        with self._lock:
            return len(self._last_sent)

    def dispatch(self, alert: ThresholdAlert) -> None:
        key = (alert.user_id, alert.year, alert.type)
        now = self.clock.now()
        with self._lock:
            self._evict_expired(now)
            if key in self._last_sent:
                logger.debug("Suppressing repeat %s alert for userId=%s", alert.type.value, alert.user_id)
                return
            self._last_sent[key] = now
        self.inner.dispatch(alert)

    def _evict_expired(self, now: datetime) -> None:
        expired = [k for k, sent in self._last_sent.items() if now - sent >= self.window]
        for k in expired:
            del self._last_sent[k]


def with_cooldown(
    inner: AlertDispatcher, clock: Clock, settings: EngineSettings
) -> AlertDispatcher:
    """Wrap ``inner`` in a cool-down window when one is configured."""
    if settings.alert_cooldown_hours is None:
        return inner
    return CooldownAlertDispatcher(inner, clock, timedelta(hours=settings.alert_cooldown_hours))
