"""
OpenSky Network client - the secondary live-position tracker.

Runway asks OpenSky two questions about a flight the schedule provider
couldn't place:

- where is transponder ``icao24`` right now?  (``find_by_icao24``)
- which aircraft are inside this box?          (``find_in_box``)

Both are answered by ``GET /states/all``. Each state is a positional
array; only the columns Runway consumes are kept (see ``_COLUMNS``).
Altitude is in meters and velocity in m/s; the position normalizer
converts them.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.auth import HTTPBasicAuth

from runway.config import AppConfig
from runway.exceptions import UpstreamUnavailableError
from runway.models import AirportLeg

logger = logging.getLogger(__name__)

# OpenSky callsign field width
CALLSIGN_WIDTH = 8

# State vector column -> array index
_COLUMNS = {
    'icao24': 0,
    'callsign': 1,
    'last_contact': 4,
    'longitude': 5,
    'latitude': 6,
    'baro_altitude': 7,
    'on_ground': 8,
    'velocity': 9,
    'true_track': 10,
}
_MIN_COLUMNS = max(_COLUMNS.values()) + 1


@dataclass
class BoundingBox:
    """Latitude/longitude rectangle, in degrees."""
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def around_route(
        cls,
        departure: AirportLeg,
        arrival: AirportLeg,
        padding_deg: float = 3.0,
    ) -> 'BoundingBox':
        """
        Box spanning both airports, padded on every side.

        Padding covers off-great-circle routing and holding patterns.
        """
        lats = (departure.latitude, arrival.latitude)
        lons = (departure.longitude, arrival.longitude)
        return cls(
            lat_min=max(-90.0, min(lats) - padding_deg),
            lat_max=min(90.0, max(lats) + padding_deg),
            lon_min=max(-180.0, min(lons) - padding_deg),
            lon_max=min(180.0, max(lons) + padding_deg),
        )

    def to_params(self) -> Dict[str, float]:
        return {
            'lamin': self.lat_min,
            'lamax': self.lat_max,
            'lomin': self.lon_min,
            'lomax': self.lon_max,
        }


@dataclass
class StateVector:
    """One aircraft as reported by OpenSky. Any field may be None."""
    icao24: str
    callsign: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: Optional[float]
    last_contact: Optional[int] = None

    @classmethod
    def from_array(cls, row: Sequence[Any]) -> Optional['StateVector']:
        """Parse a raw state array; None when it is too short or has no address."""
        if not isinstance(row, (list, tuple)) or len(row) < _MIN_COLUMNS:
            return None

        values = {name: row[index] for name, index in _COLUMNS.items()}
        icao24 = values.pop('icao24')
        if not isinstance(icao24, str) or not icao24:
            return None

        callsign = values.pop('callsign')
        values['on_ground'] = bool(values['on_ground'])
        return cls(
            icao24=icao24.lower(),
            callsign=(callsign.strip() or None) if isinstance(callsign, str) else None,
            **values,
        )

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_payload(self) -> Dict[str, Any]:
        """Field mapping consumed by the position normalizer."""
        return asdict(self)


class OpenSkyClient:
    """
    On-demand OpenSky lookups.

    Credentials are optional; anonymous access works with a lower quota.
    Implements the LiveTracker interface used by position fusion.
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.auth = HTTPBasicAuth(username, password) if username and password else None
        logger.info(f'OpenSky tracker ready ({"authenticated" if self.auth else "anonymous"})')

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'OpenSkyClient':
        opensky = app_config.opensky
        # A lone username or password is ignored; the API needs both
        return cls(
            username=opensky.username if opensky.is_authenticated else None,
            password=opensky.password if opensky.is_authenticated else None,
            base_url=app_config.opensky.base_url,
            timeout=app_config.timeouts.tracker_lookup,
        )

    def _query(self, params: Dict[str, Any]) -> List[StateVector]:
        """
        Run one /states/all query and keep the states that have a position.

        Raises UpstreamUnavailableError on timeouts, HTTP errors and bad JSON.
        """
        try:
            response = self.session.get(
                f'{self.base_url}/states/all',
                params=params,
                auth=self.auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json() or {}
        except requests.exceptions.Timeout:
            logger.warning('[OpenSky] timeout')
            raise UpstreamUnavailableError('OpenSky', 'timeout')
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(f'[OpenSky] HTTP {status}{" (rate limited)" if status == 429 else ""}')
            raise UpstreamUnavailableError('OpenSky', str(e))
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f'[OpenSky] request failed: {e}')
            raise UpstreamUnavailableError('OpenSky', str(e))

        if not isinstance(payload, dict):
            logger.warning(f'[OpenSky] unexpected payload type {type(payload).__name__}')
            raise UpstreamUnavailableError('OpenSky', 'unexpected payload')

        rows = payload.get('states') or []
        if not isinstance(rows, list):
            raise UpstreamUnavailableError('OpenSky', 'unexpected payload')
        states = [sv for sv in map(StateVector.from_array, rows) if sv is not None and sv.has_position]
        logger.debug(f'[OpenSky] {len(states)}/{len(rows)} states with a position for {params}')
        return states

    def find_by_icao24(self, icao24: str) -> List[StateVector]:
        """State vectors for one exact transponder address."""
        return self._query({'icao24': icao24.lower()})

    def find_in_box(self, bbox: BoundingBox) -> List[StateVector]:
        """All aircraft currently inside a bounding box."""
        return self._query(bbox.to_params())
