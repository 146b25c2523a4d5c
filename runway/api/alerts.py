"""
SMS alert API endpoint.

Provides:
- POST /api/alert - Schedule a one-shot SMS for a flight event
    Body: {"phone": str, "flightNumber": str, "sendAtMs": int,
           "type": "leave"|"landing"|"both_leave"|"both_landing",
           "arrivalCity": str}
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from runway.exceptions import AlertValidationError

logger = logging.getLogger(__name__)

alerts_bp = Blueprint('alerts', __name__, url_prefix='/api/alert')


def _parse_epoch_ms(value) -> datetime:
    """Epoch milliseconds -> aware UTC datetime."""
    if isinstance(value, bool):
        raise ValueError('boolean is not a timestamp')
    return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)


@alerts_bp.route('', methods=['POST'])
def schedule_alert():
    """
    Schedule an SMS alert.

    Malformed bodies and missing fields are rejected with 400. A fire time
    too far in the past is a well-formed request and is answered 200 with
    success=false.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'JSON body required'}), 400

    recipient = data.get('phone') or data.get('recipient')
    flight_number = data.get('flightNumber')
    send_at = data.get('sendAtMs', data.get('firesAt'))
    kind = data.get('type') or data.get('kind')
    arrival_city = data.get('arrivalCity') or ''

    if not recipient or not flight_number or send_at is None:
        return jsonify({'success': False, 'error': 'Missing required fields'}), 400

    try:
        fires_at = _parse_epoch_ms(send_at)
    except (TypeError, ValueError, OverflowError, OSError):
        return jsonify({'success': False, 'error': 'Invalid sendAtMs'}), 400

    scheduler = current_app.config['ALERT_SCHEDULER']
    try:
        result = scheduler.schedule(
            recipient=str(recipient),
            flight_number=str(flight_number),
            fires_at=fires_at,
            kind=kind,
            arrival_city=str(arrival_city),
        )
    except AlertValidationError as e:
        logger.info(f'Alert rejected for {recipient}/{flight_number}: {e.message}')
        return jsonify({'success': False, 'error': e.error_code, 'message': e.message})

    return jsonify(result.to_dict())
