"""
Exceptions raised by Runway.

Each exception carries a human-readable ``message`` and an HTTP-style
``code``. Only ``FlightNotFoundError`` and ``AlertValidationError`` ever
reach a client; upstream and delivery failures are recovered or logged
where they occur.
"""

from typing import Optional


class RunwayError(Exception):
    """Base class for all Runway errors."""

    error_code = 'RUNWAY_ERROR'

    def __init__(self, message: str = 'Runway error.', code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code


# -----------------------------------------------------------------------------
# Flight data
# -----------------------------------------------------------------------------

class FlightNotFoundError(RunwayError):
    """No provider candidate and no demo fixture matched the identifier."""

    error_code = 'FLIGHT_NOT_FOUND'

    def __init__(self, flight_number: str = '', hint: Optional[str] = None):
        super().__init__('Flight not found.', code=404)
        self.flight_number = flight_number
        self.hint = hint


class UpstreamUnavailableError(RunwayError):
    """A provider call failed, timed out, or returned a non-success status."""

    error_code = 'UPSTREAM_UNAVAILABLE'

    def __init__(self, provider: str = '', reason: str = ''):
        message = f'{provider or "Flight data provider"} is unavailable'
        if reason:
            message = f'{message}: {reason}'
        super().__init__(message, code=503)
        self.provider = provider


# -----------------------------------------------------------------------------
# Alerts
# -----------------------------------------------------------------------------

class AlertValidationError(RunwayError):
    """Alert request was rejected before any state was created."""

    error_code = 'ALERT_INVALID'

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message, code=400)
        if error_code:
            self.error_code = error_code


class DeliveryFailure(RunwayError):
    """An SMS could not be delivered when the alert fired."""

    error_code = 'DELIVERY_FAILED'

    def __init__(self, recipient: str = '', reason: str = ''):
        super().__init__(f'Unable to deliver SMS to {recipient}: {reason}', code=502)
        self.recipient = recipient
