"""
Flight models - the canonical shapes every provider is mapped into.

A ``FlightRecord`` is built fresh for each request and never shared.
Provider-native payloads stop at the mapping boundary: only
``RawCandidate.payload`` carries them, and candidates are discarded once
the best one has been picked.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class FlightStatus(str, Enum):
    """
    Normalized flight status.

    Providers use their own vocabularies ("En Route / On Time",
    "incident", ...); the mapping functions collapse them into these.
    """
    SCHEDULED = 'scheduled'
    ACTIVE = 'active'
    LANDED = 'landed'
    CANCELLED = 'cancelled'
    DIVERTED = 'diverted'
    UNKNOWN = 'unknown'

    @property
    def is_terminal(self) -> bool:
        """Terminal states never get live telemetry fused in."""
        return self in (FlightStatus.LANDED, FlightStatus.CANCELLED, FlightStatus.DIVERTED)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class AirportLeg:
    """One end of a flight (departure or arrival)."""
    iata: Optional[str] = None
    name: str = ''
    city: str = ''
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    terminal: str = 'N/A'
    scheduled_time: Optional[datetime] = None
    estimated_time: Optional[datetime] = None  # actual if known, else estimated
    actual_time: Optional[datetime] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return {
            'iata': self.iata,
            'name': self.name,
            'city': self.city,
            'lat': self.latitude,
            'lon': self.longitude,
            'terminal': self.terminal,
            'scheduled_time': _isoformat(self.scheduled_time),
            'estimated_time': _isoformat(self.estimated_time),
            'actual_time': _isoformat(self.actual_time),
        }


@dataclass
class LivePosition:
    """Canonical live position, always in feet / knots / degrees."""
    latitude: float
    longitude: float
    altitude_ft: Optional[float] = None
    ground_speed_kts: Optional[float] = None
    heading: Optional[float] = None
    is_on_ground: Optional[bool] = None

    @property
    def is_airborne(self) -> bool:
        """True only when a provider has explicitly reported not-on-ground."""
        return self.is_on_ground is False

    def to_dict(self) -> dict:
        return {
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': round(self.altitude_ft) if self.altitude_ft is not None else None,
            'speed': round(self.ground_speed_kts) if self.ground_speed_kts is not None else None,
            'heading': round(self.heading) if self.heading is not None else None,
            'is_ground': self.is_on_ground,
        }


@dataclass
class FlightRecord:
    """Normalized real-time flight status returned to clients."""
    flight_number: str
    airline: str
    status: FlightStatus
    departure: AirportLeg
    arrival: AirportLeg
    aircraft: Optional[str] = None
    live: Optional[LivePosition] = None
    progress: Optional[float] = None
    is_demo: bool = False

    # Enrichment keys used by position fusion
    airline_iata: Optional[str] = None
    airline_icao: Optional[str] = None
    icao24: Optional[str] = None
    provider: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'flight_number': self.flight_number,
            'airline': self.airline,
            'aircraft': self.aircraft,
            'status': self.status.value,
            'departure': self.departure.to_dict(),
            'arrival': self.arrival.to_dict(),
            'live': self.live.to_dict() if self.live else None,
            'progress': round(self.progress, 4) if self.progress is not None else None,
            'demo': self.is_demo,
        }


@dataclass
class RawCandidate:
    """
    One provider record competing to represent a flight number.

    Holds just the evidence the scorer needs; ``payload`` is the typed
    provider record the winning candidate is later mapped from.
    """
    provider: str
    payload: Any
    status_label: str = ''
    has_live_position: bool = False
    is_confirmed_airborne: Optional[bool] = None
    departed_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    index: int = field(default=0, compare=False)
