"""
Flight geometry for Runway.

NumPy-based great-circle helpers for arrival progress and ETA.
"""

from runway.analytics.geodesy import (
    EARTH_RADIUS_NM,
    estimate_eta,
    haversine_distance_nm,
    project_progress_fraction,
    time_progress_fraction,
)

__all__ = [
    'EARTH_RADIUS_NM',
    'estimate_eta',
    'haversine_distance_nm',
    'project_progress_fraction',
    'time_progress_fraction',
]
