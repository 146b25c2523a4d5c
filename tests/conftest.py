"""Shared fixtures: fake clock, timers, SMS sender, tracker and provider."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from runway.config import (
    AeroApiConfig,
    AppConfig,
    AviationStackConfig,
    OpenSkyConfig,
    TwilioConfig,
)
from runway.exceptions import DeliveryFailure, UpstreamUnavailableError
from runway.ingestion.airport_db import EMBEDDED_AIRPORTS
from runway.ingestion.opensky_client import StateVector
from runway.models import AirportLeg, FlightRecord, FlightStatus

NOW = datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    """threading.Timer stand-in; fires only when the test calls fire()."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


class TimerFactory:
    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> List[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


class FakeSmsSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[tuple] = []

    def send(self, to: str, body: str) -> Optional[str]:
        if self.fail:
            raise DeliveryFailure(to, 'carrier rejected message')
        self.sent.append((to, body))
        return f'SM{len(self.sent)}'


class FakeTracker:
    """Secondary tracker returning canned state vectors."""

    def __init__(
        self,
        by_icao24: Optional[Dict[str, List[StateVector]]] = None,
        in_box: Optional[List[StateVector]] = None,
        error: Optional[Exception] = None,
    ):
        self.by_icao24 = by_icao24 or {}
        self.in_box = in_box or []
        self.error = error
        self.icao24_queries: List[str] = []
        self.box_queries: list = []

    def find_by_icao24(self, icao24: str) -> List[StateVector]:
        self.icao24_queries.append(icao24)
        if self.error:
            raise self.error
        return self.by_icao24.get(icao24, [])

    def find_in_box(self, bbox) -> List[StateVector]:
        self.box_queries.append(bbox)
        if self.error:
            raise self.error
        return self.in_box


class FakeProvider:
    """Primary provider returning canned candidates and records."""

    name = 'fake'

    def __init__(self, candidates=None, records=None, error: Optional[Exception] = None):
        self.candidates = candidates or []
        self.records = records or {}
        self.error = error
        self.queries: List[str] = []

    def fetch_candidates(self, flight_code):
        self.queries.append(flight_code)
        if self.error:
            raise self.error
        return list(self.candidates)

    def build_record(self, candidate):
        return self.records[candidate.index]


def make_state(
    icao24: str = 'a1b2c3',
    callsign: Optional[str] = 'UAL1    ',
    latitude: Optional[float] = 41.2,
    longitude: Optional[float] = -88.1,
    altitude_m: Optional[float] = 10972.8,
    velocity_mps: Optional[float] = 250.0,
    on_ground: bool = False,
) -> StateVector:
    """StateVector parsed from an OpenSky-shaped array."""
    return StateVector.from_array([
        icao24, callsign, 'United States', 1760799600, 1760799600,
        longitude, latitude, altitude_m, on_ground, velocity_mps,
        270.0, 0.0, None, altitude_m, '1234', False, 0,
    ])


def make_record(
    flight_number: str = 'UA1',
    status: FlightStatus = FlightStatus.ACTIVE,
    with_coordinates: bool = True,
    **kwargs,
) -> FlightRecord:
    """Active EWR->SFO record with no live position."""
    ewr, sfo = EMBEDDED_AIRPORTS['EWR'], EMBEDDED_AIRPORTS['SFO']
    departure = AirportLeg(
        iata='EWR', name=ewr.name, city=ewr.city,
        scheduled_time=NOW - timedelta(hours=1),
        estimated_time=NOW - timedelta(hours=1),
        actual_time=NOW - timedelta(hours=1),
    )
    arrival = AirportLeg(
        iata='SFO', name=sfo.name, city=sfo.city,
        scheduled_time=NOW + timedelta(hours=5),
        estimated_time=NOW + timedelta(hours=5),
    )
    if with_coordinates:
        departure.latitude, departure.longitude = ewr.latitude, ewr.longitude
        arrival.latitude, arrival.longitude = sfo.latitude, sfo.longitude

    fields = dict(
        flight_number=flight_number,
        airline='United Airlines',
        status=status,
        departure=departure,
        arrival=arrival,
        airline_iata='UA',
    )
    fields.update(kwargs)
    return FlightRecord(**fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers():
    return TimerFactory()


@pytest.fixture
def sender():
    return FakeSmsSender()


@pytest.fixture
def demo_config():
    """Configuration with every external dependency unconfigured."""
    return AppConfig(
        aeroapi=AeroApiConfig(api_key=None),
        aviationstack=AviationStackConfig(api_key=None),
        opensky=OpenSkyConfig(username=None, password=None),
        twilio=TwilioConfig(account_sid=None, auth_token=None, from_number=None),
    )


@pytest.fixture
def upstream_error():
    return UpstreamUnavailableError('fake', 'timeout')
