"""
Airport reference data - IATA code to coordinates, name and city.

Data can come from:
1. OurAirports airports.csv (fetched once, on first lookup)
2. Embedded fallback data for major airports

Usage:
    from runway.ingestion.airport_db import AirportDirectory

    directory = AirportDirectory()
    info = directory.lookup('SFO')
    print(info.latitude, info.longitude)  # 37.619 -122.374
"""

import csv
import io
import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from runway.config import AppConfig

logger = logging.getLogger(__name__)

# Wait this long before retrying a failed CSV download
RELOAD_BACKOFF_SECONDS = 600


@dataclass(frozen=True)
class AirportInfo:
    """Airport information from lookup."""
    iata: str
    name: str
    city: str
    latitude: float
    longitude: float


# Major airports, used when the CSV is unavailable
EMBEDDED_AIRPORTS: Dict[str, AirportInfo] = {
    info.iata: info for info in (
        AirportInfo('ATL', 'Hartsfield-Jackson Atlanta Intl', 'Atlanta', 33.6367, -84.4281),
        AirportInfo('BOS', 'Boston Logan Intl', 'Boston', 42.3643, -71.0052),
        AirportInfo('CDG', 'Paris Charles de Gaulle', 'Paris', 49.0128, 2.55),
        AirportInfo('DEN', 'Denver Intl', 'Denver', 39.8617, -104.673),
        AirportInfo('DFW', 'Dallas Fort Worth Intl', 'Dallas', 32.8968, -97.038),
        AirportInfo('DXB', 'Dubai International', 'Dubai', 25.253, 55.365),
        AirportInfo('EWR', 'Newark Liberty Intl', 'Newark', 40.689, -74.174),
        AirportInfo('FRA', 'Frankfurt am Main', 'Frankfurt', 50.0333, 8.5706),
        AirportInfo('HND', 'Tokyo Haneda', 'Tokyo', 35.5523, 139.78),
        AirportInfo('JFK', 'J.F. Kennedy Intl', 'New York', 40.641, -73.778),
        AirportInfo('LAX', 'Los Angeles Intl', 'Los Angeles', 33.942, -118.408),
        AirportInfo('LHR', 'London Heathrow', 'London', 51.477, -0.461),
        AirportInfo('MIA', 'Miami Intl', 'Miami', 25.7932, -80.2906),
        AirportInfo('ORD', "Chicago O'Hare Intl", 'Chicago', 41.9786, -87.9048),
        AirportInfo('SEA', 'Seattle-Tacoma Intl', 'Seattle', 47.449, -122.309),
        AirportInfo('SFO', 'San Francisco Intl', 'San Francisco', 37.619, -122.374),
        AirportInfo('SIN', 'Singapore Changi', 'Singapore', 1.35019, 103.994),
        AirportInfo('SYD', 'Sydney Airport', 'Sydney', -33.946, 151.177),
        AirportInfo('YVR', 'Vancouver Intl', 'Vancouver', 49.1939, -123.184),
        AirportInfo('YYZ', 'Toronto Pearson Intl', 'Toronto', 43.6772, -79.6306),
    )
}


def parse_airports_csv(text: str) -> Dict[str, AirportInfo]:
    """
    Build an IATA index from OurAirports airports.csv content.

    Rows without an IATA code or with unparseable coordinates are skipped.
    """
    index: Dict[str, AirportInfo] = {}
    for row in csv.DictReader(io.StringIO(text)):
        iata = (row.get('iata_code') or '').strip().upper()
        if len(iata) != 3:
            continue
        try:
            latitude = float(row['latitude_deg'])
            longitude = float(row['longitude_deg'])
        except (KeyError, TypeError, ValueError):
            continue
        index[iata] = AirportInfo(
            iata=iata,
            name=(row.get('name') or '').strip(),
            city=(row.get('municipality') or '').strip(),
            latitude=latitude,
            longitude=longitude,
        )
    return index


class AirportDirectory:
    """
    Airport lookup by IATA code.

    The full OurAirports index is downloaded lazily on the first lookup.
    If the download fails, lookups fall back to the embedded table and the
    download is retried after a back-off.
    """

    def __init__(
        self,
        csv_url: str = 'https://davidmegginson.github.io/ourairports-data/airports.csv',
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.csv_url = csv_url
        self.timeout = timeout
        self.session = session or requests.Session()

        self._index: Optional[Dict[str, AirportInfo]] = None
        self._last_failure: float = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'AirportDirectory':
        return cls(
            csv_url=app_config.airports.csv_url,
            timeout=app_config.timeouts.airport_lookup,
        )

    def _ensure_index(self) -> Optional[Dict[str, AirportInfo]]:
        with self._lock:
            if self._index is not None:
                return self._index
            if time.time() - self._last_failure < RELOAD_BACKOFF_SECONDS:
                return None

            logger.info(f'Loading airport data from {self.csv_url}')
            try:
                response = self.session.get(self.csv_url, timeout=self.timeout)
                response.raise_for_status()
                self._index = parse_airports_csv(response.text)
            except requests.RequestException as e:
                self._last_failure = time.time()
                logger.warning(f'Airport data download failed, using embedded table: {e}')
                return None

            logger.info(f'Loaded {len(self._index)} airports')
            return self._index

    def lookup(self, iata: str) -> Optional[AirportInfo]:
        """Airport for an IATA code, or None if unknown."""
        iata = (iata or '').upper()
        if not iata:
            return None

        index = self._ensure_index()
        if index is not None and iata in index:
            return index[iata]
        return EMBEDDED_AIRPORTS.get(iata)
