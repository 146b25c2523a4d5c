"""
Runway Backend Package.

Real-time flight status and SMS arrival alerts, built with Flask,
requests, NumPy and Twilio.

Modules:
    api/         REST endpoints for flight lookup, alerts, and health
    models/      Dataclasses for flight records and pending alerts
    ingestion/   Provider clients (AeroAPI, AviationStack, OpenSky), position
                 normalization, airport reference data
    analytics/   NumPy great-circle progress and ETA
    services/    Candidate scoring, position fusion, flight resolution,
                 alert scheduling
    cache.py     Thread-safe airport coordinate cache
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
