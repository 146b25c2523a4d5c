"""
Flight resolution and alert services.

Candidate scoring, position fusion and the resolver pipeline on the
flight side; the delayed SMS scheduler on the alert side.
"""

from runway.services.alerts import AlertResult, AlertScheduler, render_message
from runway.services.candidates import score_candidate, select_best_candidate
from runway.services.flight_resolver import FlightResolver, finalize_progress, normalize_identifier
from runway.services.fusion import expected_callsign, fuse_live_position

__all__ = [
    'AlertResult',
    'AlertScheduler',
    'render_message',
    'score_candidate',
    'select_best_candidate',
    'FlightResolver',
    'finalize_progress',
    'normalize_identifier',
    'expected_callsign',
    'fuse_live_position',
]
