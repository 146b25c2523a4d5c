from unittest import mock

import pytest
from twilio.base.exceptions import TwilioException

from runway.config import AppConfig, TwilioConfig
from runway.exceptions import DeliveryFailure
from runway.services.alerts import AlertScheduler
from runway.services.sms import TwilioSmsSender


def test_sender_requires_full_credentials(demo_config):
    assert TwilioSmsSender.from_config(demo_config) is None

    partial = AppConfig(twilio=TwilioConfig(account_sid='AC123', auth_token='token', from_number=None))
    assert TwilioSmsSender.from_config(partial) is None
    assert AlertScheduler.from_config(partial).is_live is False


def test_send_returns_message_sid():
    client = mock.MagicMock()
    client.messages.create.return_value = mock.MagicMock(sid='SM123')
    sender = TwilioSmsSender('AC123', 'token', '+15550009999', client=client)

    assert sender.send('+15550001111', 'hello') == 'SM123'
    client.messages.create.assert_called_once_with(body='hello', from_='+15550009999', to='+15550001111')


def test_twilio_error_becomes_delivery_failure():
    client = mock.MagicMock()
    client.messages.create.side_effect = TwilioException('invalid number')
    sender = TwilioSmsSender('AC123', 'token', '+15550009999', client=client)

    with pytest.raises(DeliveryFailure) as excinfo:
        sender.send('+1000', 'hello')
    assert excinfo.value.recipient == '+1000'
