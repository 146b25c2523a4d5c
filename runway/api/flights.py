"""
Flight lookup API endpoint.

Provides:
- GET /api/flight/<number> - Resolve a flight designator to its live status
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from runway.exceptions import FlightNotFoundError

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flight')


@flights_bp.route('/<path:number>', methods=['GET'])
def get_flight(number: str):
    """
    Resolve a flight number ("UA1", "ua 1", "BA-178").

    Always answers 200 with a success flag; a miss carries a stable error
    code and a hint listing the demo flights.
    """
    start_time = time.perf_counter()
    resolver = current_app.config['FLIGHT_RESOLVER']

    try:
        record = resolver.resolve(number)
    except FlightNotFoundError as e:
        logger.info(f'Flight not found: {e.flight_number}')
        return jsonify({
            'success': False,
            'error': e.error_code,
            'message': e.message,
            'hint': e.hint,
        })

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'success': True,
        'data': record.to_dict(),
        'demo': record.is_demo,
        'query_time_ms': round(query_time_ms, 2),
    })
