import pytest

from runway.ingestion.positions import PositionSource, normalize_position
from tests.conftest import make_state


def test_aeroapi_flight_level_and_knots():
    position = normalize_position(
        {'latitude': 41.2, 'longitude': -88.1, 'altitude': 360, 'groundspeed': 520, 'heading': 270},
        PositionSource.AEROAPI,
    )
    assert position.altitude_ft == 36000
    assert position.ground_speed_kts == 520
    assert position.heading == 270
    assert position.is_on_ground is False


def test_aeroapi_ground_inferred_from_altitude():
    position = normalize_position(
        {'latitude': 40.6, 'longitude': -74.1, 'altitude': 0, 'groundspeed': 12},
        PositionSource.AEROAPI,
    )
    assert position.is_on_ground is True


def test_aviationstack_explicit_ground_flag_wins():
    position = normalize_position(
        {'latitude': 40.6, 'longitude': -74.1, 'altitude': 5000, 'speed_horizontal': 800, 'is_ground': True},
        PositionSource.AVIATIONSTACK,
    )
    assert position.is_on_ground is True


def test_aviationstack_ground_inferred_when_flag_missing():
    position = normalize_position(
        {'latitude': 40.6, 'longitude': -74.1, 'altitude': 10, 'speed_horizontal': 20},
        PositionSource.AVIATIONSTACK,
    )
    # 10 m is ~33 ft, under the 100 ft floor
    assert position.is_on_ground is True


def test_metric_units_match_imperial_units():
    imperial = normalize_position(
        {'latitude': 10.0, 'longitude': 20.0, 'altitude': 100, 'groundspeed': 486},
        PositionSource.AEROAPI,
    )
    metric = normalize_position(
        {'latitude': 10.0, 'longitude': 20.0, 'altitude': 3048, 'speed_horizontal': 900},
        PositionSource.AVIATIONSTACK,
    )
    assert metric.altitude_ft == pytest.approx(imperial.altitude_ft, abs=1)
    assert metric.ground_speed_kts == pytest.approx(imperial.ground_speed_kts, abs=1)


def test_opensky_state_vector():
    state = make_state(altitude_m=10000, velocity_mps=250)
    position = normalize_position(state.to_payload(), PositionSource.OPENSKY)
    assert position.altitude_ft == pytest.approx(32810)
    assert position.ground_speed_kts == pytest.approx(485.96)
    assert position.is_on_ground is False


@pytest.mark.parametrize('payload', [
    None,
    {},
    {'latitude': 10.0},
    {'longitude': 20.0, 'altitude': 300},
    {'latitude': 'n/a', 'longitude': 20.0},
])
def test_missing_coordinates_is_none(payload):
    assert normalize_position(payload, PositionSource.AEROAPI) is None


def test_missing_optional_fields_stay_none():
    position = normalize_position({'latitude': 1.0, 'longitude': 2.0}, PositionSource.AEROAPI)
    assert position.altitude_ft is None
    assert position.ground_speed_kts is None
    assert position.is_on_ground is None
