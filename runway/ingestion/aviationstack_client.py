"""
AviationStack client - schedule provider with optional embedded position.

AviationStack's /flights endpoint returns every leg it knows for a flight
number (yesterday's, today's, tomorrow's), frequently with a lagging
``flight_status``. All legs are returned as candidates so the scorer can
weigh the corroborating evidence: embedded ``live`` telemetry and actual
departure/arrival timestamps.

Embedded ``live`` blocks report altitude in meters and speed in km/h.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from runway.config import AppConfig
from runway.exceptions import UpstreamUnavailableError
from runway.ingestion.positions import PositionSource, normalize_position
from runway.ingestion.providers import json_object, parse_datetime
from runway.models import AirportLeg, FlightRecord, FlightStatus, RawCandidate

logger = logging.getLogger(__name__)

PROVIDER_NAME = 'aviationstack'

_STATUS_MAP = {
    'scheduled': FlightStatus.SCHEDULED,
    'active': FlightStatus.ACTIVE,
    'landed': FlightStatus.LANDED,
    'cancelled': FlightStatus.CANCELLED,
    'diverted': FlightStatus.DIVERTED,
}


@dataclass
class AviationStackLeg:
    """Departure or arrival block of an AviationStack flight."""
    airport: Optional[str] = None
    iata: Optional[str] = None
    terminal: Optional[str] = None
    scheduled: Optional[str] = None
    estimated: Optional[str] = None
    actual: Optional[str] = None
    actual_runway: Optional[str] = None

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'AviationStackLeg':
        data = json_object(data)
        return cls(
            airport=data.get('airport'),
            iata=data.get('iata'),
            terminal=data.get('terminal'),
            scheduled=data.get('scheduled'),
            estimated=data.get('estimated'),
            actual=data.get('actual'),
            actual_runway=data.get('actual_runway'),
        )

    @property
    def actual_time(self):
        return parse_datetime(self.actual) or parse_datetime(self.actual_runway)


@dataclass
class AviationStackFlight:
    """One flight entry from the AviationStack /flights response."""
    flight_iata: Optional[str]
    flight_status: Optional[str]
    departure: AviationStackLeg
    arrival: AviationStackLeg
    airline_name: Optional[str] = None
    airline_iata: Optional[str] = None
    airline_icao: Optional[str] = None
    aircraft_iata: Optional[str] = None
    aircraft_icao: Optional[str] = None
    aircraft_icao24: Optional[str] = None
    live: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'AviationStackFlight':
        airline = json_object(data.get('airline'))
        flight = json_object(data.get('flight'))
        aircraft = json_object(data.get('aircraft'))
        return cls(
            flight_iata=flight.get('iata'),
            flight_status=data.get('flight_status'),
            departure=AviationStackLeg.from_json(data.get('departure')),
            arrival=AviationStackLeg.from_json(data.get('arrival')),
            airline_name=airline.get('name'),
            airline_iata=airline.get('iata'),
            airline_icao=airline.get('icao'),
            aircraft_iata=aircraft.get('iata'),
            aircraft_icao=aircraft.get('icao'),
            aircraft_icao24=aircraft.get('icao24'),
            live=data.get('live') if isinstance(data.get('live'), dict) else None,
        )


def to_candidate(flight: AviationStackFlight, index: int = 0) -> RawCandidate:
    """Extract scoring evidence from an AviationStack flight."""
    position = normalize_position(flight.live, PositionSource.AVIATIONSTACK)

    confirmed_airborne = None
    if position is not None and position.is_on_ground is not None:
        confirmed_airborne = not position.is_on_ground

    return RawCandidate(
        provider=PROVIDER_NAME,
        payload=flight,
        status_label=(flight.flight_status or '').lower(),
        has_live_position=position is not None,
        is_confirmed_airborne=confirmed_airborne,
        departed_at=flight.departure.actual_time,
        arrived_at=flight.arrival.actual_time,
        index=index,
    )


def to_flight_record(flight: AviationStackFlight) -> FlightRecord:
    """Map an AviationStack flight into the canonical FlightRecord."""
    dep, arr = flight.departure, flight.arrival

    departure = AirportLeg(
        iata=dep.iata,
        name=dep.airport or '',
        terminal=dep.terminal or 'N/A',
        scheduled_time=parse_datetime(dep.scheduled),
        estimated_time=dep.actual_time or parse_datetime(dep.estimated) or parse_datetime(dep.scheduled),
        actual_time=dep.actual_time,
    )
    arrival = AirportLeg(
        iata=arr.iata,
        name=arr.airport or '',
        terminal=arr.terminal or 'N/A',
        scheduled_time=parse_datetime(arr.scheduled),
        estimated_time=arr.actual_time or parse_datetime(arr.estimated) or parse_datetime(arr.scheduled),
        actual_time=arr.actual_time,
    )

    return FlightRecord(
        flight_number=flight.flight_iata or 'Unknown',
        airline=flight.airline_name or flight.airline_iata or 'Unknown',
        aircraft=flight.aircraft_icao or flight.aircraft_iata,
        status=_STATUS_MAP.get((flight.flight_status or '').lower(), FlightStatus.UNKNOWN),
        departure=departure,
        arrival=arrival,
        live=normalize_position(flight.live, PositionSource.AVIATIONSTACK),
        airline_iata=flight.airline_iata,
        airline_icao=flight.airline_icao,
        icao24=(flight.aircraft_icao24 or '').lower() or None,
        provider=PROVIDER_NAME,
    )


class AviationStackClient:
    """
    Client for the AviationStack /flights endpoint.

    Implements the FlightDataProvider interface.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        base_url: str = 'http://api.aviationstack.com/v1',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'AviationStackClient':
        return cls(
            api_key=app_config.aviationstack.api_key,
            base_url=app_config.aviationstack.base_url,
            timeout=app_config.timeouts.flight_lookup,
        )

    def fetch_candidates(self, flight_code: str) -> List[RawCandidate]:
        """All legs AviationStack reports for an IATA flight code."""
        params = {
            'access_key': self.api_key,
            'flight_iata': flight_code,
        }

        logger.debug(f'Fetching flight info for {flight_code}')

        try:
            response = self.session.get(
                f'{self.base_url}/flights',
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f'AviationStack request failed: {e}')
            raise UpstreamUnavailableError(PROVIDER_NAME, str(e))

        if response.status_code != 200:
            logger.warning(f'AviationStack API error: {response.status_code}')
            raise UpstreamUnavailableError(PROVIDER_NAME, f'HTTP {response.status_code}')

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(PROVIDER_NAME, f'invalid JSON: {e}')

        if not isinstance(data, dict):
            logger.warning(f'AviationStack returned {type(data).__name__}, expected an object')
            raise UpstreamUnavailableError(PROVIDER_NAME, 'unexpected payload')

        if 'error' in data:
            logger.warning(f'AviationStack API error: {data["error"]}')
            raise UpstreamUnavailableError(PROVIDER_NAME, str(data['error']))

        flights = data.get('data') or []
        if not isinstance(flights, list):
            raise UpstreamUnavailableError(PROVIDER_NAME, 'unexpected payload')
        candidates = [
            to_candidate(AviationStackFlight.from_json(raw), index)
            for index, raw in enumerate(flights)
            if isinstance(raw, dict)
        ]
        logger.info(f'[AviationStack] {flight_code}: {len(candidates)} candidate(s)')
        return candidates

    def build_record(self, candidate: RawCandidate) -> FlightRecord:
        return to_flight_record(candidate.payload)
