"""
FlightAware AeroAPI client - primary schedule provider.

``GET /flights/{ident}`` returns recent and upcoming legs for a flight
designator, newest first, without any position. The chosen leg's last
position comes from ``GET /flights/{fa_flight_id}/position``, which
reports altitude in flight levels and ground speed in knots.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from runway.config import AppConfig
from runway.exceptions import UpstreamUnavailableError
from runway.ingestion.airlines import airline_name, icao_to_iata
from runway.ingestion.positions import PositionSource, normalize_position
from runway.ingestion.providers import json_object, parse_datetime
from runway.models import AirportLeg, FlightRecord, FlightStatus, RawCandidate

logger = logging.getLogger(__name__)

PROVIDER_NAME = 'aeroapi'


def map_status(fa_status: Optional[str]) -> FlightStatus:
    """Collapse FlightAware's free-text status ("En Route / Delayed", ...)."""
    if not fa_status:
        return FlightStatus.UNKNOWN
    s = fa_status.lower()
    if 'en route' in s or 'departed' in s:
        return FlightStatus.ACTIVE
    if 'arrived' in s or 'landed' in s:
        return FlightStatus.LANDED
    if 'cancelled' in s:
        return FlightStatus.CANCELLED
    if 'diverted' in s:
        return FlightStatus.DIVERTED
    if 'scheduled' in s:
        return FlightStatus.SCHEDULED
    return FlightStatus.UNKNOWN


@dataclass
class AeroApiAirport:
    code: Optional[str] = None
    code_iata: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'AeroApiAirport':
        data = json_object(data)
        return cls(
            code=data.get('code'),
            code_iata=data.get('code_iata'),
            name=data.get('name'),
            city=data.get('city'),
        )

    @property
    def iata(self) -> Optional[str]:
        return self.code_iata or self.code


@dataclass
class AeroApiFlight:
    """One leg from the AeroAPI /flights/{ident} response."""
    ident: Optional[str]
    ident_iata: Optional[str]
    fa_flight_id: Optional[str]
    operator: Optional[str]
    operator_iata: Optional[str]
    status: Optional[str]
    aircraft_type: Optional[str]
    origin: AeroApiAirport
    destination: AeroApiAirport
    terminal_origin: Optional[str] = None
    terminal_destination: Optional[str] = None
    scheduled_out: Optional[str] = None
    actual_out: Optional[str] = None
    actual_off: Optional[str] = None
    scheduled_in: Optional[str] = None
    estimated_in: Optional[str] = None
    actual_on: Optional[str] = None
    actual_in: Optional[str] = None
    progress_percent: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'AeroApiFlight':
        return cls(
            ident=data.get('ident'),
            ident_iata=data.get('ident_iata'),
            fa_flight_id=data.get('fa_flight_id'),
            operator=data.get('operator'),
            operator_iata=data.get('operator_iata'),
            status=data.get('status'),
            aircraft_type=data.get('aircraft_type'),
            origin=AeroApiAirport.from_json(data.get('origin')),
            destination=AeroApiAirport.from_json(data.get('destination')),
            terminal_origin=data.get('terminal_origin'),
            terminal_destination=data.get('terminal_destination'),
            scheduled_out=data.get('scheduled_out'),
            actual_out=data.get('actual_out'),
            actual_off=data.get('actual_off'),
            scheduled_in=data.get('scheduled_in'),
            estimated_in=data.get('estimated_in'),
            actual_on=data.get('actual_on'),
            actual_in=data.get('actual_in'),
            progress_percent=data.get('progress_percent'),
        )

    @property
    def departed_at(self):
        return parse_datetime(self.actual_off) or parse_datetime(self.actual_out)

    @property
    def arrived_at(self):
        return parse_datetime(self.actual_on) or parse_datetime(self.actual_in)


def to_candidate(flight: AeroApiFlight, index: int = 0) -> RawCandidate:
    """Extract scoring evidence from an AeroAPI leg (no embedded position)."""
    return RawCandidate(
        provider=PROVIDER_NAME,
        payload=flight,
        status_label=map_status(flight.status).value,
        departed_at=flight.departed_at,
        arrived_at=flight.arrived_at,
        index=index,
    )


def to_flight_record(
    flight: AeroApiFlight,
    position: Optional[Dict[str, Any]] = None,
) -> FlightRecord:
    """Map an AeroAPI leg (and its last position, if any) into a FlightRecord."""
    departed_at = flight.departed_at
    arrived_at = flight.arrived_at

    departure = AirportLeg(
        iata=flight.origin.iata,
        name=flight.origin.name or '',
        city=flight.origin.city or '',
        terminal=flight.terminal_origin or 'N/A',
        scheduled_time=parse_datetime(flight.scheduled_out),
        estimated_time=departed_at or parse_datetime(flight.scheduled_out),
        actual_time=departed_at,
    )
    arrival = AirportLeg(
        iata=flight.destination.iata,
        name=flight.destination.name or '',
        city=flight.destination.city or '',
        terminal=flight.terminal_destination or 'N/A',
        scheduled_time=parse_datetime(flight.scheduled_in),
        estimated_time=arrived_at or parse_datetime(flight.estimated_in) or parse_datetime(flight.scheduled_in),
        actual_time=arrived_at,
    )

    progress = None
    if flight.progress_percent is not None:
        progress = flight.progress_percent / 100

    return FlightRecord(
        flight_number=flight.ident_iata or flight.ident or 'Unknown',
        airline=airline_name(flight.operator) or flight.operator or 'Unknown',
        aircraft=flight.aircraft_type,
        status=map_status(flight.status),
        departure=departure,
        arrival=arrival,
        live=normalize_position(position, PositionSource.AEROAPI),
        progress=progress,
        airline_iata=flight.operator_iata or icao_to_iata(flight.operator),
        airline_icao=flight.operator,
        provider=PROVIDER_NAME,
    )


class AeroApiClient:
    """
    Client for FlightAware AeroAPI v4.

    Implements the FlightDataProvider interface.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        base_url: str = 'https://aeroapi.flightaware.com/aeroapi',
        timeout: float = 10.0,
        position_timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.position_timeout = position_timeout
        self.session = session or requests.Session()
        self.session.headers.update({'x-apikey': api_key})

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'AeroApiClient':
        return cls(
            api_key=app_config.aeroapi.api_key,
            base_url=app_config.aeroapi.base_url,
            timeout=app_config.timeouts.flight_lookup,
            position_timeout=app_config.timeouts.position_lookup,
        )

    def _get_json(self, path: str, timeout: float) -> Dict[str, Any]:
        try:
            response = self.session.get(f'{self.base_url}{path}', timeout=timeout)
        except requests.RequestException as e:
            logger.warning(f'[FlightAware] request failed: {e}')
            raise UpstreamUnavailableError('FlightAware', str(e))

        if not response.ok:
            logger.warning(f'[FlightAware] {response.status_code} for {path}')
            raise UpstreamUnavailableError('FlightAware', f'HTTP {response.status_code}')

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError('FlightAware', f'invalid JSON: {e}')

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f'[FlightAware] {type(data).__name__} body for {path}, expected an object')
            raise UpstreamUnavailableError('FlightAware', 'unexpected payload')
        return data

    def fetch_candidates(self, flight_code: str) -> List[RawCandidate]:
        data = self._get_json(f'/flights/{quote(flight_code)}', self.timeout)
        flights = data.get('flights') or []
        if not isinstance(flights, list):
            raise UpstreamUnavailableError('FlightAware', 'unexpected payload')
        candidates = [
            to_candidate(AeroApiFlight.from_json(raw), index)
            for index, raw in enumerate(flights)
            if isinstance(raw, dict)
        ]
        logger.info(f'[FlightAware] {flight_code}: {len(candidates)} candidate(s)')
        return candidates

    def fetch_position(self, fa_flight_id: str) -> Optional[Dict[str, Any]]:
        """Last known position for one leg; None when it can't be fetched."""
        try:
            data = self._get_json(f'/flights/{quote(fa_flight_id)}/position', self.position_timeout)
        except UpstreamUnavailableError as e:
            logger.warning(f'[FlightAware] position fetch failed: {e.message}')
            return None
        return json_object(data.get('last_position')) or data

    def build_record(self, candidate: RawCandidate) -> FlightRecord:
        flight: AeroApiFlight = candidate.payload

        position = None
        if flight.fa_flight_id and map_status(flight.status) == FlightStatus.ACTIVE:
            position = self.fetch_position(flight.fa_flight_id)
            if position:
                logger.info(
                    f'[FlightAware] position: alt={position.get("altitude")} '
                    f'spd={position.get("groundspeed")} hdg={position.get("heading")}'
                )

        return to_flight_record(flight, position)
