"""
Tests for SMS providers and the alert gateway
"""
import json

import httpx
import pytest
from unittest.mock import MagicMock

from disaster_response.alerts.sms_gateway import SmsGateway, send_alert_request
from disaster_response.alerts.sms_providers import (
    Fast2SmsProvider,
    MockSmsProvider,
    TwilioSmsProvider,
)
from disaster_response.core.config import Settings
from disaster_response.core.exceptions import (
    ConfigurationError,
    ProviderError,
    RecipientValidationError,
    ValidationError,
)


def fast2sms_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class CrashingProvider(MockSmsProvider):
    """Raises a non-provider error for the numbers it is told to crash on."""

    def __init__(self, crash_numbers, **kwargs):
        super().__init__(**kwargs)
        self.crash_numbers = set(crash_numbers)

    def send(self, number, message):
        if number in self.crash_numbers:
            raise RuntimeError(f"driver crashed on {number}")
        return super().send(number, message)

    def send_bulk(self, numbers, message):
        if self.crash_numbers.intersection(numbers):
            raise KeyError("request_id")
        return super().send_bulk(numbers, message)


class TestProviderSelection:
    """Test suite for the provider strategy list."""

    def test_first_configured_provider_wins(self):
        primary = MockSmsProvider(configured=False)
        secondary = MockSmsProvider()
        gateway = SmsGateway([primary, secondary])

        assert gateway.resolve_provider() is secondary

    def test_no_provider_configured(self):
        gateway = SmsGateway([MockSmsProvider(configured=False)])

        with pytest.raises(ConfigurationError):
            gateway.send(["9876543210"], "test")

    def test_configuration_checked_before_recipients(self):
        gateway = SmsGateway([])

        with pytest.raises(ConfigurationError):
            gateway.send(["invalid"], "test")

    def test_from_settings_order(self):
        settings = Settings(
            _env_file=None,
            twilio_account_sid="AC123",
            twilio_auth_token="token",
            twilio_phone_number="+15005550006",
            fast2sms_api_key="key",
        )
        gateway = SmsGateway.from_settings(settings)

        assert [p.name for p in gateway.providers] == ["twilio", "fast2sms"]
        assert gateway.resolve_provider().name == "twilio"

    def test_from_settings_falls_back_to_fast2sms(self):
        settings = Settings(_env_file=None, fast2sms_api_key="key")
        gateway = SmsGateway.from_settings(settings)

        assert gateway.resolve_provider().name == "fast2sms"


class TestPerRecipientSend:
    """Test suite for per-recipient fan-out."""

    def test_invalid_numbers_dropped(self, gateway, mock_provider):
        result = gateway.send(["9876543210", "invalid", "8123456789"], "alert")

        assert result.total == 2
        assert [m.to for m in mock_provider.sent_messages] == ["919876543210", "918123456789"]

    def test_all_succeed(self, gateway):
        result = gateway.send(["9876543210", "8123456789"], "alert")

        assert result.success
        assert result.sent == result.total == 2
        assert result.provider == "mock"

    def test_one_failure_does_not_abort_others(self):
        provider = MockSmsProvider(failing_numbers={"919876543210"})
        gateway = SmsGateway([provider])

        result = gateway.send(["9876543210", "8123456789", "7012345678"], "alert")

        assert result.sent == 2
        assert result.total == 3
        assert result.success
        failed = [r for r in result.results if not r.success]
        assert failed[0].number == "919876543210"
        assert "Mock failure" in failed[0].error

    def test_unexpected_error_does_not_abort_others(self):
        provider = CrashingProvider(crash_numbers={"919876543210"})
        result = SmsGateway([provider]).send(["9876543210", "8123456789"], "alert")

        assert result.sent == 1
        assert result.total == 2
        assert result.results[0].error == "driver crashed on 919876543210"
        assert [m.to for m in provider.sent_messages] == ["918123456789"]

    def test_all_fail(self):
        provider = MockSmsProvider(failing_numbers={"919876543210"})
        result = SmsGateway([provider]).send(["9876543210"], "alert")

        assert result.sent == 0
        assert not result.success

    def test_no_valid_recipients(self, gateway):
        with pytest.raises(RecipientValidationError):
            gateway.send(["123", "abc", ""], "alert")

    def test_result_dict_shape(self, gateway):
        data = gateway.send(["9876543210"], "alert").to_dict()

        assert data["success"] is True
        assert data["sent"] == 1
        assert data["total"] == 1
        assert data["results"] == [{"number": "919876543210", "success": True}]


class TestBulkSend:
    """Test suite for whole-batch providers."""

    def test_batch_success_marks_every_recipient(self):
        provider = MockSmsProvider(bulk=True)
        result = SmsGateway([provider]).send(["9876543210", "8123456789"], "alert")

        assert result.sent == result.total == 2
        assert len(provider.sent_messages) == 2

    def test_batch_failure_marks_every_recipient(self):
        provider = MockSmsProvider(bulk=True, failing_numbers={"918123456789"})
        result = SmsGateway([provider]).send(["9876543210", "8123456789"], "alert")

        assert result.sent == 0
        assert result.total == 2
        assert not result.success
        assert result.error == "Mock batch failure"

    def test_unexpected_batch_error_fails_whole_batch(self):
        provider = CrashingProvider(crash_numbers={"918123456789"}, bulk=True)
        result = SmsGateway([provider]).send(["9876543210", "8123456789"], "alert")

        assert result.sent == 0
        assert result.total == 2
        assert not result.success
        assert result.error == str(KeyError("request_id"))
        assert all(not r.success for r in result.results)


class TestTwilioProvider:
    """Test suite for the Twilio provider."""

    def setup_method(self):
        self.client = MagicMock()
        self.client.messages.create.return_value.sid = "SM123"
        self.provider = TwilioSmsProvider(
            account_sid="AC123",
            auth_token="token",
            from_number="+15005550006",
            client=self.client,
        )

    def test_not_configured_without_sender(self):
        provider = TwilioSmsProvider(account_sid="AC123", auth_token="token")
        assert not provider.is_configured

    def test_send_uses_e164(self):
        sid = self.provider.send("919876543210", "alert")

        assert sid == "SM123"
        self.client.messages.create.assert_called_once_with(
            body="alert", from_="+15005550006", to="+919876543210"
        )

    def test_send_failure_raises_provider_error(self):
        self.client.messages.create.side_effect = RuntimeError("timeout")

        with pytest.raises(ProviderError):
            self.provider.send("919876543210", "alert")

    def test_gateway_partial_failure(self):
        self.client.messages.create.side_effect = [
            MagicMock(sid="SM1"),
            RuntimeError("unreachable"),
        ]
        result = SmsGateway([self.provider]).send(["9876543210", "8123456789"], "alert")

        assert result.sent == 1
        assert result.total == 2
        assert result.success


class TestFast2SmsProvider:
    """Test suite for the Fast2SMS bulk provider."""

    def test_bulk_payload(self):
        captured = []

        def handler(request):
            captured.append((request.headers["authorization"], json.loads(request.content)))
            return httpx.Response(200, json={"return": True, "request_id": "req-1"})

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))
        request_id = provider.send_bulk(["919876543210", "918123456789"], "alert")

        assert request_id == "req-1"
        auth, payload = captured[0]
        assert auth == "key"
        assert payload["numbers"] == "9876543210,8123456789"
        assert payload["route"] == "q"
        assert payload["message"] == "alert"

    def test_rejected_batch(self):
        def handler(request):
            return httpx.Response(400, json={"return": False, "message": ["Invalid Numbers"]})

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))

        with pytest.raises(ProviderError, match="Invalid Numbers"):
            provider.send_bulk(["919876543210"], "alert")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))
        result = SmsGateway([provider]).send(["9876543210"], "alert")

        assert not result.success
        assert result.results[0].error.startswith("Fast2SMS request failed")

    def test_non_json_response(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))

        with pytest.raises(ProviderError):
            provider.send_bulk(["919876543210"], "alert")

    def test_non_object_json_response(self):
        def handler(request):
            return httpx.Response(200, json=["Invalid Authentication"])

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))

        with pytest.raises(ProviderError, match="Invalid response from Fast2SMS"):
            provider.send_bulk(["919876543210"], "alert")

    def test_non_object_json_through_gateway(self):
        def handler(request):
            return httpx.Response(200, json="ok")

        provider = Fast2SmsProvider(api_key="key", client=fast2sms_client(handler))
        result = SmsGateway([provider]).send(["9876543210"], "alert")

        assert not result.success
        assert result.total == 1
        assert result.error == "Invalid response from Fast2SMS"


class TestAlertRequest:
    """Test suite for the outbound alert request shapes."""

    def test_list_shape(self, gateway):
        result = send_alert_request(gateway, {"phoneNumbers": ["9876543210", "8123456789"], "message": "hi"})
        assert result.total == 2

    def test_legacy_single_number(self, gateway):
        result = send_alert_request(gateway, {"phoneNumber": "9876543210", "message": "hi"})
        assert result.total == 1

    def test_missing_numbers(self, gateway):
        with pytest.raises(RecipientValidationError):
            send_alert_request(gateway, {"message": "hi"})

    def test_missing_message(self, gateway):
        with pytest.raises(ValidationError):
            send_alert_request(gateway, {"phoneNumbers": ["9876543210"]})
