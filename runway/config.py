"""
Configuration management for Runway.

Loads settings from environment variables with sensible defaults.
Presence or absence of provider credentials is what switches each
external dependency between live and demo mode.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class AeroApiConfig:
    """FlightAware AeroAPI configuration (primary schedule provider)."""
    api_key: Optional[str] = os.getenv('FLIGHTAWARE_API_KEY') or None
    base_url: str = 'https://aeroapi.flightaware.com/aeroapi'

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class AviationStackConfig:
    """AviationStack API configuration (alternate schedule provider)."""
    api_key: Optional[str] = os.getenv('AVIATIONSTACK_API_KEY') or None
    base_url: str = 'http://api.aviationstack.com/v1'

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration (secondary live-position tracker)."""
    username: Optional[str] = os.getenv('OPENSKY_USERNAME') or None
    password: Optional[str] = os.getenv('OPENSKY_PASSWORD') or None
    base_url: str = 'https://opensky-network.org/api'

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class TwilioConfig:
    """Twilio SMS delivery credentials."""
    account_sid: Optional[str] = os.getenv('TWILIO_ACCOUNT_SID') or None
    auth_token: Optional[str] = os.getenv('TWILIO_AUTH_TOKEN') or None
    from_number: Optional[str] = os.getenv('TWILIO_PHONE_NUMBER') or None

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)


@dataclass(frozen=True)
class TimeoutConfig:
    """Per call-class timeouts for outbound requests (seconds)."""
    flight_lookup: float = 10.0
    position_lookup: float = 5.0
    tracker_lookup: float = 10.0
    airport_lookup: float = 10.0


@dataclass(frozen=True)
class AirportDataConfig:
    """Airport reference data source."""
    csv_url: str = os.getenv(
        'AIRPORTS_CSV_URL',
        'https://davidmegginson.github.io/ourairports-data/airports.csv',
    )


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    aeroapi: AeroApiConfig = field(default_factory=AeroApiConfig)
    aviationstack: AviationStackConfig = field(default_factory=AviationStackConfig)
    opensky: OpenSkyConfig = field(default_factory=OpenSkyConfig)
    twilio: TwilioConfig = field(default_factory=TwilioConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    airports: AirportDataConfig = field(default_factory=AirportDataConfig)

    # Flask settings
    port: int = 3000
    debug: bool = False

    @property
    def flight_data_live(self) -> bool:
        return self.aeroapi.is_configured or self.aviationstack.is_configured

    @property
    def sms_live(self) -> bool:
        return self.twilio.is_configured


def load_config() -> AppConfig:
    """Load all configuration from the environment."""
    return AppConfig(
        aeroapi=AeroApiConfig(),
        aviationstack=AviationStackConfig(),
        opensky=OpenSkyConfig(),
        twilio=TwilioConfig(),
        timeouts=TimeoutConfig(),
        airports=AirportDataConfig(),
        port=int(os.getenv('PORT', '3000')),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
