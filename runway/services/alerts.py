"""
Alert scheduler - one delayed SMS per (recipient, flight).

Each scheduled alert owns a one-shot timer and a cancellation token. The
pending table, the cancel-then-replace of an existing entry, and the
fire-time removal all happen under one lock, so two requests racing on
the same key leave exactly one armed timer and an alert can't both be
replaced and delivered.

Single timers are capped at 2**31-1 ms (~24.8 days). Longer delays are
chained: the capped timer re-arms for the remainder instead of firing.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Union

from runway.config import AppConfig
from runway.exceptions import AlertValidationError, DeliveryFailure
from runway.models import AlertKind, PendingAlert, alert_key
from runway.services.sms import SmsSender, TwilioSmsSender

logger = logging.getLogger(__name__)

# Alerts this far in the past still count as "now" (clock skew, latency)
PAST_TOLERANCE = timedelta(seconds=60)

# Longest delay a single timer is armed for
MAX_TIMER_DELAY = timedelta(milliseconds=2 ** 31 - 1)

MESSAGE_TEMPLATES = {
    AlertKind.LEAVE: '✈️ Runway: Time to head to the airport! {flight} arrives in {city} soon.',
    AlertKind.LANDING: '✈️ Runway: {flight} has landed in {city}! Go pick them up 🎉',
    AlertKind.BOTH_LEAVE: '✈️ Runway: Time to leave for {city}. {flight} is on its way.',
    AlertKind.BOTH_LANDING: '✈️ Runway: {flight} touched down in {city}!',
}


def render_message(kind: Union[AlertKind, str, None], flight_number: str, arrival_city: str) -> str:
    """Message body for an alert kind; unknown kinds use the leave template."""
    if not isinstance(kind, AlertKind):
        kind = AlertKind.parse(kind)
    template = MESSAGE_TEMPLATES.get(kind, MESSAGE_TEMPLATES[AlertKind.LEAVE])
    return template.format(flight=flight_number, city=arrival_city or 'your destination')


@dataclass
class AlertResult:
    """Outcome of a schedule request."""
    success: bool
    message: str
    demo: bool = False

    def to_dict(self) -> dict:
        result = {'success': self.success, 'message': self.message}
        if self.demo:
            result['demo'] = True
        return result


class AlertScheduler:
    """
    Process-wide table of pending alerts.

    Args:
        sender: SMS sender, or None for demo mode (requests are validated
                and accepted but no timer is armed).
        clock: Returns the current aware UTC datetime.
        timer_factory: ``threading.Timer``-compatible constructor.
        max_timer_delay: Longest single timer before chaining.
    """

    def __init__(
        self,
        sender: Optional[SmsSender] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        max_timer_delay: timedelta = MAX_TIMER_DELAY,
    ):
        self.sender = sender
        self.clock = clock
        self.timer_factory = timer_factory
        self.max_timer_delay = max_timer_delay

        self._pending: Dict[str, PendingAlert] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'AlertScheduler':
        if not app_config.sms_live:
            logger.warning('SMS alerts: demo mode (Twilio not configured)')
            return cls(sender=None)

        logger.info('SMS alerts: live (Twilio)')
        return cls(sender=TwilioSmsSender.from_config(app_config))

    @property
    def is_live(self) -> bool:
        return self.sender is not None

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def schedule(
        self,
        recipient: str,
        flight_number: str,
        fires_at: datetime,
        kind: Union[AlertKind, str, None] = AlertKind.LEAVE,
        arrival_city: str = '',
    ) -> AlertResult:
        """
        Schedule (or replace) the alert for a recipient and flight.

        Raises AlertValidationError for missing fields or a fire time more
        than 60 seconds in the past. Nothing is created on rejection.
        """
        if not recipient or not flight_number or fires_at is None:
            raise AlertValidationError('Missing required fields', 'MISSING_FIELDS')
        if fires_at.tzinfo is None:
            fires_at = fires_at.replace(tzinfo=timezone.utc)

        now = self.clock()
        if fires_at < now - PAST_TOLERANCE:
            raise AlertValidationError('Alert time is in the past', 'ALERT_IN_PAST')

        if not isinstance(kind, AlertKind):
            kind = AlertKind.parse(kind)
        when = fires_at.strftime('%H:%M:%S UTC')

        if not self.is_live:
            logger.info(f'[Demo SMS] Would text {recipient} at {when} about {flight_number}')
            return AlertResult(success=True, message=f'SMS scheduled for {when}', demo=True)

        alert = PendingAlert(
            recipient=recipient,
            flight_number=flight_number,
            fires_at=fires_at,
            kind=kind,
            arrival_city=arrival_city or '',
        )

        with self._lock:
            previous = self._pending.pop(alert.key, None)
            if previous is not None:
                previous.cancel()
                logger.info(f'Replaced pending alert {alert.key}')
            self._pending[alert.key] = alert
            self._arm(alert)

        logger.info(f'SMS for {flight_number} to {recipient} scheduled for {when} ({kind.value})')
        return AlertResult(success=True, message=f'SMS scheduled for {when}')

    def _arm(self, alert: PendingAlert) -> None:
        """Start the next timer for an alert. Caller holds the lock."""
        delay = max(0.0, (alert.fires_at - self.clock()).total_seconds())
        max_delay = self.max_timer_delay.total_seconds()

        if delay > max_delay:
            timer = self.timer_factory(max_delay, self._rearm, args=(alert,))
        else:
            timer = self.timer_factory(delay, self._fire, args=(alert,))
        timer.daemon = True
        alert.timer = timer
        timer.start()

    def _is_current(self, alert: PendingAlert) -> bool:
        return not alert.cancelled.is_set() and self._pending.get(alert.key) is alert

    def _rearm(self, alert: PendingAlert) -> None:
        with self._lock:
            if not self._is_current(alert):
                return
            logger.debug(f'Re-arming long-delay alert {alert.key}')
            self._arm(alert)

    def _fire(self, alert: PendingAlert) -> None:
        with self._lock:
            if not self._is_current(alert):
                return
            # Removed before delivery; there is no retry either way
            del self._pending[alert.key]

        body = render_message(alert.kind, alert.flight_number, alert.arrival_city)
        try:
            self.sender.send(alert.recipient, body)
        except DeliveryFailure as e:
            logger.error(f'SMS delivery failed for {alert.key}: {e.message}')
            return
        except Exception as e:
            # Runs on a timer thread; nothing above it would log this
            logger.error(f'Unexpected error sending SMS for {alert.key}: {e}')
            return

        logger.info(f'SMS sent to {alert.recipient} for {alert.flight_number}')

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_pending(self, recipient: str, flight_number: str) -> Optional[PendingAlert]:
        with self._lock:
            return self._pending.get(alert_key(recipient, flight_number))

    @property
    def pending_alerts(self) -> List[PendingAlert]:
        with self._lock:
            return list(self._pending.values())
