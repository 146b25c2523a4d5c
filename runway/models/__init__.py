"""
Data models for Runway.

Plain dataclasses, owned by the request (flights) or the alert scheduler
(pending alerts). Nothing here is persisted.
"""

from runway.models.flight import (
    AirportLeg,
    FlightRecord,
    FlightStatus,
    LivePosition,
    RawCandidate,
)
from runway.models.alert import AlertKind, PendingAlert, alert_key

__all__ = [
    'AirportLeg',
    'FlightRecord',
    'FlightStatus',
    'LivePosition',
    'RawCandidate',
    'AlertKind',
    'PendingAlert',
    'alert_key',
]
