"""
Data ingestion module for Runway.

Provider clients (FlightAware AeroAPI, AviationStack, OpenSky), the
position normalizer that maps their telemetry onto one shape, and airport
reference data.
"""

from runway.ingestion.aeroapi_client import AeroApiClient
from runway.ingestion.airport_db import AirportDirectory, AirportInfo
from runway.ingestion.aviationstack_client import AviationStackClient
from runway.ingestion.opensky_client import BoundingBox, OpenSkyClient, StateVector
from runway.ingestion.positions import PositionSource, normalize_position

__all__ = [
    'AeroApiClient',
    'AirportDirectory',
    'AirportInfo',
    'AviationStackClient',
    'BoundingBox',
    'OpenSkyClient',
    'StateVector',
    'PositionSource',
    'normalize_position',
]
