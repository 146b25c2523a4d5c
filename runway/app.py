"""
Runway Flask Application.

Main entry point for the web application. Initializes:
- Flight resolver (provider clients, tracker, airport cache)
- Alert scheduler (Twilio sender or demo mode)
- API routes

Usage:
    python -m runway.app

Or with gunicorn:
    gunicorn 'runway.app:create_app()'
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from runway.api import alerts_bp, flights_bp, status_bp
from runway.config import AppConfig, config
from runway.services import AlertScheduler, FlightResolver

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    app_config: Optional[AppConfig] = None,
    resolver: Optional[FlightResolver] = None,
    scheduler: Optional[AlertScheduler] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        app_config: Configuration to wire collaborators from
                    (environment-loaded config if None).
        resolver: Pre-built flight resolver. Pass one in tests.
        scheduler: Pre-built alert scheduler. Pass one in tests.

    Returns:
        Configured Flask application instance.
    """
    app_config = app_config or config

    app = Flask(__name__)

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Process-wide collaborators, owned by this app instance
    app.config['FLIGHT_RESOLVER'] = resolver or FlightResolver.from_config(app_config)
    app.config['ALERT_SCHEDULER'] = scheduler or AlertScheduler.from_config(app_config)

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(alerts_bp)
    app.register_blueprint(status_bp)

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'success': False, 'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'success': False, 'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()
    resolver = app.config['FLIGHT_RESOLVER']
    scheduler = app.config['ALERT_SCHEDULER']

    logger.info(f'Starting Runway on http://localhost:{config.port}')
    logger.info(f'Flight data : {"live (" + resolver.provider.name + ")" if resolver.is_live else "demo mode"}')
    logger.info(f'SMS alerts  : {"live (Twilio)" if scheduler.is_live else "demo mode"}')

    app.run(
        host='0.0.0.0',
        port=config.port,
        debug=config.debug,
        use_reloader=False,  # A reloader would duplicate pending alert timers
    )


if __name__ == '__main__':
    run_development_server()
