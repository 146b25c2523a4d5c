"""
Position normalizer - maps provider position payloads onto LivePosition.

Each source reports in its own units and field names:

    aeroapi        altitude in flight levels (hundreds of ft), speed in knots
    aviationstack  altitude in meters, speed in km/h, explicit is_ground
    opensky        altitude in meters, speed in m/s, explicit on_ground

When a source has no explicit ground flag, ground status is inferred from
altitude against that source's noise floor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from runway.models import LivePosition

FEET_PER_FLIGHT_LEVEL = 100.0
FEET_PER_METER = 3.281
KNOTS_PER_KMH = 0.539957
KNOTS_PER_MPS = 1.94384


class PositionSource(str, Enum):
    """Provider a position payload came from."""
    AEROAPI = 'aeroapi'
    AVIATIONSTACK = 'aviationstack'
    OPENSKY = 'opensky'


@dataclass(frozen=True)
class _SourceUnits:
    latitude_field: str
    longitude_field: str
    altitude_field: str
    speed_field: str
    heading_field: str
    ground_field: Optional[str]
    altitude_factor: float
    speed_factor: float
    ground_threshold_ft: float


_SOURCES = {
    PositionSource.AEROAPI: _SourceUnits(
        latitude_field='latitude',
        longitude_field='longitude',
        altitude_field='altitude',
        speed_field='groundspeed',
        heading_field='heading',
        ground_field=None,
        altitude_factor=FEET_PER_FLIGHT_LEVEL,
        speed_factor=1.0,
        ground_threshold_ft=10.0,
    ),
    PositionSource.AVIATIONSTACK: _SourceUnits(
        latitude_field='latitude',
        longitude_field='longitude',
        altitude_field='altitude',
        speed_field='speed_horizontal',
        heading_field='direction',
        ground_field='is_ground',
        altitude_factor=FEET_PER_METER,
        speed_factor=KNOTS_PER_KMH,
        ground_threshold_ft=100.0,
    ),
    PositionSource.OPENSKY: _SourceUnits(
        latitude_field='latitude',
        longitude_field='longitude',
        altitude_field='baro_altitude',
        speed_field='velocity',
        heading_field='true_track',
        ground_field='on_ground',
        altitude_factor=FEET_PER_METER,
        speed_factor=KNOTS_PER_MPS,
        ground_threshold_ft=100.0,
    ),
}


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_position(
    payload: Optional[Mapping[str, Any]],
    source: PositionSource,
) -> Optional[LivePosition]:
    """
    Convert a provider position payload to a LivePosition.

    Returns None if the payload has no usable latitude/longitude.
    """
    if not payload or not isinstance(payload, Mapping):
        return None

    units = _SOURCES[PositionSource(source)]

    latitude = _as_float(payload.get(units.latitude_field))
    longitude = _as_float(payload.get(units.longitude_field))
    if latitude is None or longitude is None:
        return None

    altitude_ft = None
    raw_altitude = _as_float(payload.get(units.altitude_field))
    if raw_altitude is not None:
        altitude_ft = raw_altitude * units.altitude_factor

    ground_speed_kts = None
    raw_speed = _as_float(payload.get(units.speed_field))
    if raw_speed is not None:
        ground_speed_kts = raw_speed * units.speed_factor

    is_on_ground = None
    if units.ground_field is not None and payload.get(units.ground_field) is not None:
        is_on_ground = bool(payload.get(units.ground_field))
    elif altitude_ft is not None:
        is_on_ground = altitude_ft < units.ground_threshold_ft

    return LivePosition(
        latitude=latitude,
        longitude=longitude,
        altitude_ft=altitude_ft,
        ground_speed_kts=ground_speed_kts,
        heading=_as_float(payload.get(units.heading_field)),
        is_on_ground=is_on_ground,
    )
