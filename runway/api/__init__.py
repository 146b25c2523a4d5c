"""
API module for Runway.

Provides REST endpoints for:
- Flight lookup
- SMS alert scheduling
- Service health
"""

from runway.api.alerts import alerts_bp
from runway.api.flights import flights_bp
from runway.api.status import status_bp

__all__ = ['alerts_bp', 'flights_bp', 'status_bp']
