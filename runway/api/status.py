"""
Health/status API endpoint.

Provides:
- GET /api/health - Live vs. demo mode for each external dependency

Mode is decided purely from configuration; no provider is probed.
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

status_bp = Blueprint('status', __name__, url_prefix='/api')


@status_bp.route('/health', methods=['GET'])
def health():
    resolver = current_app.config['FLIGHT_RESOLVER']
    scheduler = current_app.config['ALERT_SCHEDULER']

    return jsonify({
        'status': 'ok',
        'services': {
            'flight_data': 'live' if resolver.is_live else 'demo',
            'sms': 'live' if scheduler.is_live else 'demo',
        },
        'airport_cache': resolver.airport_cache.stats,
        'pending_alerts': len(scheduler.pending_alerts),
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
