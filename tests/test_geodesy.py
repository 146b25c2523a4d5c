from datetime import timedelta

import pytest

from runway.analytics.geodesy import (
    estimate_eta,
    haversine_distance_nm,
    project_progress_fraction,
    time_progress_fraction,
)
from tests.conftest import NOW

EWR = (40.689, -74.174)
SFO = (37.619, -122.374)


def test_haversine_known_distance():
    # JFK-LAX is roughly 2,150 nm great-circle
    distance = haversine_distance_nm(40.641, -73.778, 33.942, -118.408)
    assert 2130 < distance < 2170


def test_haversine_zero_for_same_point():
    assert haversine_distance_nm(*EWR, *EWR) == pytest.approx(0.0)


@pytest.mark.parametrize('speed', [None, 0, 49])
def test_eta_none_for_slow_or_missing_speed(speed):
    assert estimate_eta(*EWR, *SFO, speed, now=NOW) is None


def test_eta_for_moving_aircraft():
    # One degree of latitude is 60 nm; 1000 nm at 200 kt is five hours
    dest_lat = 1000 / 60.0
    eta = estimate_eta(0.0, 0.0, dest_lat, 0.0, 200, now=NOW)
    assert eta is not None
    assert eta - NOW == pytest.approx(timedelta(hours=5), abs=timedelta(minutes=2))


def test_progress_at_endpoints_is_clamped():
    at_departure = project_progress_fraction(*EWR, *SFO, *EWR)
    at_arrival = project_progress_fraction(*EWR, *SFO, *SFO)
    assert at_departure == pytest.approx(0.02)
    assert at_arrival == pytest.approx(0.98)


def test_progress_is_monotonic_along_route():
    fractions = []
    for step in range(1, 10):
        t = step / 10
        lat = EWR[0] + (SFO[0] - EWR[0]) * t
        lon = EWR[1] + (SFO[1] - EWR[1]) * t
        fractions.append(project_progress_fraction(*EWR, *SFO, lat, lon))
    assert fractions == sorted(fractions)
    assert all(0.02 <= f <= 0.98 for f in fractions)


def test_progress_none_for_degenerate_route():
    assert project_progress_fraction(*EWR, *EWR, 41.0, -80.0) is None


def test_time_progress():
    start = NOW - timedelta(hours=1)
    end = NOW + timedelta(hours=3)
    assert time_progress_fraction(start, end, NOW) == pytest.approx(0.25)
    assert time_progress_fraction(start, end, NOW + timedelta(hours=10)) == 1.0
    assert time_progress_fraction(None, end, NOW) is None
    assert time_progress_fraction(end, start, NOW) is None
