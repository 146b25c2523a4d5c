"""
Primary flight-schedule provider interface.

A provider turns a flight code into zero or more ``RawCandidate`` objects
and, once the scorer has chosen one, maps that candidate into a
``FlightRecord``. Provider-native payloads never cross this boundary.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from runway.models import FlightRecord, RawCandidate

logger = logging.getLogger(__name__)


class FlightDataProvider(Protocol):
    name: str

    def fetch_candidates(self, flight_code: str) -> List[RawCandidate]:
        """Candidate records for a normalized flight code (may be empty).

        Raises UpstreamUnavailableError on network/timeout/status failures.
        """
        ...

    def build_record(self, candidate: RawCandidate) -> FlightRecord:
        """Map the chosen candidate into a canonical FlightRecord."""
        ...


def parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from a provider, or None."""
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        parsed = datetime.fromisoformat(dt_str.replace('Z', '+00:00'))
    except (TypeError, ValueError):
        logger.debug(f'Unparseable provider timestamp: {dt_str!r}')
        return None
    # Providers without an offset report UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def json_object(value: Any) -> Dict[str, Any]:
    """A JSON object from a provider payload; anything else reads as empty."""
    return value if isinstance(value, dict) else {}
