"""
Alert models - pending SMS notifications.

A ``PendingAlert`` lives in the scheduler's table from the moment it is
scheduled until it fires or is replaced by a newer alert for the same
(recipient, flight) key.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class AlertKind(str, Enum):
    """Which message template an alert renders when it fires."""
    LEAVE = 'leave'
    LANDING = 'landing'
    BOTH_LEAVE = 'both_leave'
    BOTH_LANDING = 'both_landing'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'AlertKind':
        """Parse a client-supplied kind, falling back to LEAVE."""
        try:
            return cls((value or '').strip().lower())
        except ValueError:
            return cls.LEAVE


def alert_key(recipient: str, flight_number: str) -> str:
    """Table key for a (recipient, flight) pair."""
    return f'{recipient}:{flight_number}'


@dataclass
class PendingAlert:
    """
    A scheduled, not-yet-fired notification.

    ``cancelled`` is the cancellation token: once set, a timer that is
    already running its callback will not deliver.
    """
    recipient: str
    flight_number: str
    fires_at: datetime
    kind: AlertKind
    arrival_city: str
    timer: Optional[threading.Timer] = field(default=None, repr=False)
    cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def key(self) -> str:
        return alert_key(self.recipient, self.flight_number)

    def cancel(self) -> None:
        self.cancelled.set()
        if self.timer is not None:
            self.timer.cancel()
