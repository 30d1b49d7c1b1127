"""
SMS gateway for rescue-crew alert fan-out

Chooses the first configured provider from an ordered list and sends one
message to every valid recipient. Partial delivery is a normal outcome.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from disaster_response.alerts.sms_providers import (
    Fast2SmsProvider,
    SmsProvider,
    TwilioSmsProvider,
)
from disaster_response.core.config import Settings, settings as default_settings
from disaster_response.core.exceptions import (
    ConfigurationError,
    ProviderError,
    RecipientValidationError,
    ValidationError,
)
from disaster_response.core.phone import PhoneNumberNormalizer

logger = logging.getLogger(__name__)


@dataclass
class AlertOutcome:
    """Delivery result for one recipient."""
    number: str
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"number": self.number, "success": self.success}
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class GatewayResult:
    """Aggregate result of one fan-out."""
    results: List[AlertOutcome] = field(default_factory=list)
    provider: Optional[str] = None
    error: Optional[str] = None

    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success(self) -> bool:
        return self.sent > 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "sent": self.sent,
            "total": self.total,
            "results": [r.to_dict() for r in self.results],
        }
        if self.provider:
            data["provider"] = self.provider
        if self.error:
            data["error"] = self.error
        return data


class SmsGateway:
    """
    Sends alerts through the first configured provider.

    Providers are tried in the order given; only configuration decides
    which one is used, never a failed send.
    """

    def __init__(
        self,
        providers: List[SmsProvider],
        normalizer: Optional[PhoneNumberNormalizer] = None
    ):
        self.providers = list(providers)
        self.normalizer = normalizer or PhoneNumberNormalizer()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SmsGateway":
        """Build the gateway with Twilio first and Fast2SMS as fallback."""
        settings = settings or default_settings
        normalizer = PhoneNumberNormalizer(country_code=settings.country_code)

        return cls(
            providers=[
                TwilioSmsProvider(
                    account_sid=settings.twilio_account_sid,
                    auth_token=settings.twilio_auth_token,
                    from_number=settings.twilio_phone_number,
                    normalizer=normalizer,
                ),
                Fast2SmsProvider(
                    api_key=settings.fast2sms_api_key,
                    url=settings.fast2sms_url,
                    timeout=settings.sms_timeout_seconds,
                    normalizer=normalizer,
                ),
            ],
            normalizer=normalizer,
        )

    def resolve_provider(self) -> SmsProvider:
        """
        Pick the provider for this request.

        Raises:
            ConfigurationError: If no provider has credentials
        """
        for provider in self.providers:
            if provider.is_configured:
                return provider
        raise ConfigurationError(
            "SMS service not configured. Set Twilio credentials or FAST2SMS_API_KEY."
        )

    def filter_recipients(self, numbers: Iterable[str]) -> List[str]:
        """Valid numbers in canonical form; invalid entries are dropped."""
        valid = []
        for number in numbers:
            if number and self.normalizer.is_valid(number):
                valid.append(self.normalizer.normalize(number))
            else:
                logger.warning(f"Dropping invalid recipient number: {number!r}")
        return valid

    def send(self, numbers: Iterable[str], message: str) -> GatewayResult:
        """
        Send a message to every valid recipient.

        Args:
            numbers: Candidate recipient numbers
            message: Alert text

        Returns:
            GatewayResult with one outcome per valid recipient

        Raises:
            ConfigurationError: If no provider is configured
            RecipientValidationError: If no valid recipients remain
        """
        provider = self.resolve_provider()

        recipients = self.filter_recipients(numbers)
        if not recipients:
            raise RecipientValidationError("No valid phone numbers provided")

        if provider.bulk:
            result = self._send_bulk(provider, recipients, message)
        else:
            result = self._send_each(provider, recipients, message)

        logger.info(
            f"Alert fan-out via {provider.name}: {result.sent} sent, "
            f"{result.total - result.sent} failed out of {result.total}"
        )
        return result

    def _send_each(
        self,
        provider: SmsProvider,
        recipients: List[str],
        message: str
    ) -> GatewayResult:
        result = GatewayResult(provider=provider.name)
        for number in recipients:
            try:
                provider.send(number, message)
                result.results.append(AlertOutcome(number=number, success=True))
            except Exception as e:
                if not isinstance(e, ProviderError):
                    logger.exception(f"{provider.name} send to {number} failed unexpectedly")
                result.results.append(AlertOutcome(number=number, success=False, error=str(e)))
        return result

    def _send_bulk(
        self,
        provider: SmsProvider,
        recipients: List[str],
        message: str
    ) -> GatewayResult:
        # The bulk API has no per-recipient status; every outcome mirrors the batch.
        try:
            provider.send_bulk(recipients, message)
        except Exception as e:
            if not isinstance(e, ProviderError):
                logger.exception(f"{provider.name} batch send failed unexpectedly")
            return GatewayResult(
                results=[AlertOutcome(number=n, success=False, error=str(e)) for n in recipients],
                provider=provider.name,
                error=str(e),
            )
        return GatewayResult(
            results=[AlertOutcome(number=n, success=True) for n in recipients],
            provider=provider.name,
        )


def send_alert_request(gateway: SmsGateway, payload: Dict[str, Any]) -> GatewayResult:
    """
    Handle an outbound alert request body.

    Accepts ``{"phoneNumbers": [...], "message": ...}`` or the legacy
    single-number form ``{"phoneNumber": ..., "message": ...}``.

    Raises:
        ValidationError: If the message or numbers are missing
        ConfigurationError: If no provider is configured
    """
    numbers = payload.get("phoneNumbers")
    if not numbers and payload.get("phoneNumber"):
        numbers = [payload["phoneNumber"]]
    message = payload.get("message")

    if not numbers:
        raise RecipientValidationError("At least one phone number is required")
    if not message:
        raise ValidationError("Message is required")

    return gateway.send(numbers, message)
