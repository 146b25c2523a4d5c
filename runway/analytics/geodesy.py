"""
Great-circle geometry for arrival progress and ETA.

All functions are pure. Distances are in nautical miles because
providers report ground speed in knots, so ``distance / speed`` gives
hours directly.

Progress is measured along the sphere rather than from timestamps:
the three points (departure, arrival, current) are turned into unit
vectors and the angular distances dep->arr and dep->current are
compared. This stays meaningful when a flight is delayed or early,
where schedule-based progress drifts.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

import numpy as np

EARTH_RADIUS_NM = 3440.065

# Below this, ground speed is parked or stale telemetry, not a moving aircraft
MIN_ETA_SPEED_KTS = 50.0

# Avoid reporting exactly 0% / 100% from noisy GPS near an endpoint
PROGRESS_MIN = 0.02
PROGRESS_MAX = 0.98

# Degenerate route (dep == arr) below this many radians
MIN_ROUTE_RADIANS = 0.001


def haversine_distance_nm(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points in nautical miles.

    Uses the Haversine formula for accuracy over short to medium distances.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_NM * c


def estimate_eta(
    current_lat: float,
    current_lon: float,
    dest_lat: float,
    dest_lon: float,
    ground_speed_kts: Optional[float],
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Estimate arrival time from current position and ground speed.

    Returns None when speed is unknown or below 50 kt.
    """
    if ground_speed_kts is None or ground_speed_kts < MIN_ETA_SPEED_KTS:
        return None

    now = now or datetime.now(timezone.utc)
    distance_nm = haversine_distance_nm(current_lat, current_lon, dest_lat, dest_lon)
    hours_remaining = distance_nm / ground_speed_kts

    return now + timedelta(hours=hours_remaining)


def _unit_vector(lat: float, lon: float) -> np.ndarray:
    """Point on the unit sphere for a (lat, lon) pair in degrees."""
    lat_rad, lon_rad = np.radians(lat), np.radians(lon)
    return np.array([
        np.cos(lat_rad) * np.cos(lon_rad),
        np.cos(lat_rad) * np.sin(lon_rad),
        np.sin(lat_rad),
    ])


def _angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Central angle in radians (spherical law of cosines)."""
    return float(np.arccos(np.clip(np.dot(a, b), -1.0, 1.0)))


def project_progress_fraction(
    dep_lat: float, dep_lon: float,
    arr_lat: float, arr_lon: float,
    cur_lat: float, cur_lon: float,
) -> Optional[float]:
    """
    Fraction of the dep->arr great circle already covered.

    Clamped to [0.02, 0.98]. Returns None for a degenerate route.
    """
    dep = _unit_vector(dep_lat, dep_lon)
    arr = _unit_vector(arr_lat, arr_lon)
    cur = _unit_vector(cur_lat, cur_lon)

    total = _angle_between(dep, arr)
    if total < MIN_ROUTE_RADIANS:
        return None

    partial = _angle_between(dep, cur)
    return float(np.clip(partial / total, PROGRESS_MIN, PROGRESS_MAX))


def time_progress_fraction(
    start: Optional[datetime],
    end: Optional[datetime],
    now: Optional[datetime] = None,
) -> Optional[float]:
    """Elapsed share of the scheduled block time, in [0, 1]."""
    if start is None or end is None:
        return None

    block_seconds = (end - start).total_seconds()
    if block_seconds <= 0:
        return None

    now = now or datetime.now(timezone.utc)
    elapsed = (now - start).total_seconds()
    return min(1.0, max(0.0, elapsed / block_seconds))
