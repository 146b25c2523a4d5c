"""
Demo flights served when no live provider is configured (or it has
nothing for the requested flight). Times are relative to the moment of
lookup so the fixtures always look like flights in progress.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from runway.models import AirportLeg, FlightRecord, FlightStatus, LivePosition

# (code, flight number, airline, airline IATA, aircraft,
#  departure (iata, name, city, lat, lon, terminal, hours ago),
#  arrival (iata, name, city, lat, lon, terminal, scheduled in h, estimated in h),
#  live (lat, lon, alt ft, speed kt, heading), progress)
_DEMO_FIXTURES = (
    ('BA178', 'BA 178', 'British Airways', 'BA', 'B77W',
     ('LHR', 'London Heathrow', 'London', 51.477, -0.461, 'T5', 4.8),
     ('JFK', 'J.F. Kennedy Intl', 'New York', 40.641, -73.778, 'T7', 3.2, 3.4),
     (52.1, -32.4, 36000, 548, 272), 0.60),
    ('AA100', 'AA 100', 'American Airlines', 'AA', 'B77W',
     ('JFK', 'J.F. Kennedy Intl', 'New York', 40.641, -73.778, 'T8', 2.5),
     ('LAX', 'Los Angeles Intl', 'Los Angeles', 33.942, -118.408, 'T4', 3.8, 3.8),
     (39.8, -97.5, 37000, 532, 266), 0.40),
    ('QF1', 'QF 1', 'Qantas Airways', 'QF', 'A388',
     ('SYD', 'Sydney Airport', 'Sydney', -33.946, 151.177, 'T1', 7.0),
     ('LAX', 'Los Angeles Intl', 'Los Angeles', 33.942, -118.408, 'T4', 6.5, 6.2),
     (20.5, -155.2, 38000, 565, 54), 0.52),
    ('EK202', 'EK 202', 'Emirates', 'EK', 'A388',
     ('DXB', 'Dubai International', 'Dubai', 25.253, 55.365, 'T3', 9.0),
     ('JFK', 'J.F. Kennedy Intl', 'New York', 40.641, -73.778, 'T4', 5.2, 5.0),
     (48.2, 15.8, 39000, 558, 298), 0.63),
    ('UA1', 'UA 1', 'United Airlines', 'UA', 'B789',
     ('EWR', 'Newark Liberty Intl', 'Newark', 40.689, -74.174, 'C', 1.2),
     ('SFO', 'San Francisco Intl', 'San Francisco', 37.619, -122.374, '3', 4.3, 4.3),
     (41.2, -88.1, 36000, 520, 270), 0.22),
)

DEMO_CODES = tuple(fixture[0] for fixture in _DEMO_FIXTURES)


def demo_hint() -> str:
    """Hint listing the identifiers that resolve in demo mode."""
    return f'Try {", ".join(DEMO_CODES[:-1])} or {DEMO_CODES[-1]}.'


def _build(fixture: tuple, now: datetime) -> FlightRecord:
    _, number, airline, airline_iata, aircraft, dep, arr, live, progress = fixture
    departed = now - timedelta(hours=dep[6])

    return FlightRecord(
        flight_number=number,
        airline=airline,
        aircraft=aircraft,
        status=FlightStatus.ACTIVE,
        departure=AirportLeg(
            iata=dep[0], name=dep[1], city=dep[2],
            latitude=dep[3], longitude=dep[4], terminal=dep[5],
            scheduled_time=departed,
            estimated_time=departed,
            actual_time=departed,
        ),
        arrival=AirportLeg(
            iata=arr[0], name=arr[1], city=arr[2],
            latitude=arr[3], longitude=arr[4], terminal=arr[5],
            scheduled_time=now + timedelta(hours=arr[6]),
            estimated_time=now + timedelta(hours=arr[7]),
        ),
        live=LivePosition(
            latitude=live[0], longitude=live[1],
            altitude_ft=live[2], ground_speed_kts=live[3], heading=live[4],
            is_on_ground=False,
        ),
        progress=progress,
        is_demo=True,
        airline_iata=airline_iata,
        provider='demo',
    )


def get_demo_flight(code: str, now: Optional[datetime] = None) -> Optional[FlightRecord]:
    """Demo record for a normalized flight code, or None."""
    now = now or datetime.now(timezone.utc)
    fixtures: Dict[str, tuple] = {fixture[0]: fixture for fixture in _DEMO_FIXTURES}
    fixture = fixtures.get(code)
    if fixture is None:
        return None
    return _build(fixture, now)
