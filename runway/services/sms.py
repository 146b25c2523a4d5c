"""
SMS delivery through Twilio.
"""

import logging
from typing import Optional, Protocol

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from runway.config import AppConfig
from runway.exceptions import DeliveryFailure

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    def send(self, to: str, body: str) -> Optional[str]:
        """Send one message; raise DeliveryFailure if it can't be sent."""
        ...


class TwilioSmsSender:
    """Sends SMS messages from the configured Twilio number."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str, client: Optional[Client] = None):
        self.from_number = from_number
        self._client = client or Client(account_sid, auth_token)

    @classmethod
    def from_config(cls, app_config: AppConfig) -> Optional['TwilioSmsSender']:
        """Sender for the configured account, or None in demo mode."""
        if not app_config.twilio.is_configured:
            return None
        return cls(
            account_sid=app_config.twilio.account_sid,
            auth_token=app_config.twilio.auth_token,
            from_number=app_config.twilio.from_number,
        )

    def send(self, to: str, body: str) -> Optional[str]:
        """Send a message and return its Twilio SID."""
        try:
            message = self._client.messages.create(body=body, from_=self.from_number, to=to)
        except (TwilioException, requests.RequestException) as e:
            raise DeliveryFailure(to, str(e))
        return message.sid
