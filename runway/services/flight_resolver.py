"""
Flight resolution - identifier in, normalized FlightRecord out.

Pipeline (linear, one request at a time):

    1. Normalize the identifier ("ua-1 " -> "UA1")
    2. Live tier: provider candidates -> best candidate -> FlightRecord,
       airport coordinates, tracker fusion, progress/ETA
    3. Demo tier: fixed demo fixtures
    4. FlightNotFoundError

Upstream failures in the live tier are logged and fall through to the demo
tier; enrichment failures (airports, fusion) only cost the enrichment.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Optional

from runway.analytics.geodesy import time_progress_fraction
from runway.cache import AirportCache
from runway.config import AppConfig
from runway.exceptions import FlightNotFoundError, UpstreamUnavailableError
from runway.ingestion import (
    AeroApiClient,
    AirportDirectory,
    AirportInfo,
    AviationStackClient,
    OpenSkyClient,
)
from runway.ingestion.providers import FlightDataProvider
from runway.models import AirportLeg, FlightRecord, FlightStatus
from runway.services.candidates import select_best_candidate
from runway.services.demo_flights import demo_hint, get_demo_flight
from runway.services.fusion import LiveTracker, fuse_live_position, recompute_progress_and_eta

logger = logging.getLogger(__name__)

# Schedule-based progress never claims more than this for a flight that
# hasn't reported landing
OVERDUE_PROGRESS_CAP = 0.9


def normalize_identifier(identifier: str) -> str:
    """Upper-case and strip whitespace/hyphens: 'ba-178 ' -> 'BA178'."""
    return re.sub(r'[\s\-]', '', identifier or '').upper()


def finalize_progress(record: FlightRecord, now: Optional[datetime] = None) -> FlightRecord:
    """
    Settle progress and ETA once all sources have been consulted.

    Airborne positions drive progress/ETA geometrically; otherwise an active
    flight falls back to schedule-based progress, capped at 0.9 while no
    landing has been reported.
    """
    now = now or datetime.now(timezone.utc)

    if record.status == FlightStatus.LANDED:
        record.progress = 1.0
        return record

    if record.live is not None and record.live.is_airborne:
        recompute_progress_and_eta(record, now)

    if record.progress is None and record.status == FlightStatus.ACTIVE:
        dep, arr = record.departure, record.arrival
        progress = time_progress_fraction(
            dep.actual_time or dep.estimated_time or dep.scheduled_time,
            arr.estimated_time or arr.scheduled_time,
            now,
        )
        if progress is not None and arr.actual_time is None:
            progress = min(progress, OVERDUE_PROGRESS_CAP)
        record.progress = progress

    return record


class FlightResolver:
    """
    Resolves flight identifiers through the provider tiers.

    All collaborators are injected; ``from_config`` wires the real ones.
    """

    def __init__(
        self,
        provider: Optional[FlightDataProvider] = None,
        tracker: Optional[LiveTracker] = None,
        airport_lookup: Optional[Callable[[str], Optional[AirportInfo]]] = None,
        airport_cache: Optional[AirportCache] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.provider = provider
        self.tracker = tracker
        self.airport_lookup = airport_lookup
        self.airport_cache = airport_cache or AirportCache()
        self.clock = clock

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'FlightResolver':
        """Wire the resolver from configuration (AeroAPI preferred)."""
        provider = None
        if not app_config.flight_data_live:
            logger.warning('Flight data: demo mode (no provider API key configured)')
        elif app_config.aeroapi.is_configured:
            provider = AeroApiClient.from_config(app_config)
        else:
            provider = AviationStackClient.from_config(app_config)

        if provider:
            logger.info(f'Flight data: live ({provider.name})')

        return cls(
            provider=provider,
            tracker=OpenSkyClient.from_config(app_config),
            airport_lookup=AirportDirectory.from_config(app_config).lookup,
            airport_cache=AirportCache(),
        )

    @property
    def is_live(self) -> bool:
        return self.provider is not None

    def resolve(self, identifier: str) -> FlightRecord:
        """
        Resolve an identifier to a FlightRecord.

        Raises FlightNotFoundError when neither tier has the flight.
        """
        code = normalize_identifier(identifier)
        now = self.clock()

        if self.provider is not None and code:
            record = self._resolve_live(code, now)
            if record is not None:
                return record

        demo = get_demo_flight(code, now)
        if demo is not None:
            logger.info(f'Serving demo flight for {code}')
            return demo

        raise FlightNotFoundError(code, hint=demo_hint())

    def _resolve_live(self, code: str, now: datetime) -> Optional[FlightRecord]:
        try:
            candidates = self.provider.fetch_candidates(code)
            if not candidates:
                logger.info(f'[{self.provider.name}] no flights for {code}')
                return None

            best = select_best_candidate(candidates, now)
            record = self.provider.build_record(best)
        except UpstreamUnavailableError as e:
            logger.warning(f'Live lookup failed for {code}, falling back: {e.message}')
            return None
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f'Malformed provider data for {code}: {e}')
            return None

        logger.info(
            f'[{self.provider.name}] {record.flight_number} | status={record.status.value} '
            f'| progress={record.progress}'
        )

        self._enrich_airport(record.departure)
        self._enrich_airport(record.arrival)
        fuse_live_position(record, self.tracker, now)
        return finalize_progress(record, now)

    def _enrich_airport(self, leg: AirportLeg) -> None:
        """Fill in coordinates (and missing name/city) for one leg."""
        if self.airport_lookup is None or not leg.iata:
            return

        try:
            info = self.airport_cache.get_or_load(leg.iata, self.airport_lookup)
        except Exception as e:
            logger.warning(f'Airport lookup failed for {leg.iata}: {e}')
            return

        if info is None:
            return
        if not leg.has_coordinates:
            leg.latitude, leg.longitude = info.latitude, info.longitude
        leg.name = leg.name or info.name
        leg.city = leg.city or info.city
