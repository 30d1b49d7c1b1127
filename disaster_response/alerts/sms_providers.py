"""
SMS providers for rescue-crew alerts

Twilio is the primary provider (one request per recipient). Fast2SMS is the
secondary provider and only offers a bulk endpoint, so it reports success or
failure for the whole batch at once.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Set

import httpx
from twilio.rest import Client

from disaster_response.core.exceptions import ProviderError
from disaster_response.core.phone import PhoneNumberNormalizer

logger = logging.getLogger(__name__)


@dataclass
class SentMessage:
    """Record of a message handed to a provider."""
    to: str
    body: str
    provider: str
    message_id: Optional[str] = None
    sent_at: datetime = field(default_factory=datetime.utcnow)


class SmsProvider(ABC):
    """
    One SMS backend.

    Per-recipient providers implement ``send``; bulk providers set
    ``bulk = True`` and implement ``send_bulk``. Both raise
    ``ProviderError`` on failure.
    """

    name: str = "sms"
    bulk: bool = False

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credentials this provider needs are present."""

    def send(self, number: str, message: str) -> str:
        """Send to one canonical number. Returns the provider message id."""
        raise NotImplementedError(f"{self.name} does not support single sends")

    def send_bulk(self, numbers: List[str], message: str) -> str:
        """Send to all numbers in one request. Returns the provider request id."""
        raise NotImplementedError(f"{self.name} does not support bulk sends")


class TwilioSmsProvider(SmsProvider):
    """
    Primary provider using the Twilio REST API.

    Destination numbers are sent in E.164 form (``+91XXXXXXXXXX``).
    """

    name = "twilio"

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        normalizer: Optional[PhoneNumberNormalizer] = None,
        client: Optional[Client] = None
    ):
        """
        Initialize Twilio provider.

        Args:
            account_sid: Twilio account SID
            auth_token: Twilio auth token
            from_number: Twilio phone number to send from
            normalizer: Phone normalizer for the destination country
            client: Pre-built Twilio client (tests)
        """
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.normalizer = normalizer or PhoneNumberNormalizer()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = Client(self.account_sid, self.auth_token)
            logger.info("Twilio SMS client initialized")
        return self._client

    def send(self, number: str, message: str) -> str:
        to = self.normalizer.to_e164(number)

        try:
            twilio_message = self._get_client().messages.create(
                body=message,
                from_=self.from_number,
                to=to
            )
        except Exception as e:
            logger.error(f"Twilio send to {to} failed: {e}")
            raise ProviderError(str(e)) from e

        logger.info(f"SMS sent to {to}: {twilio_message.sid}")
        return twilio_message.sid


class Fast2SmsProvider(SmsProvider):
    """
    Secondary provider using the Fast2SMS bulk endpoint.

    All numbers go out in one request as a comma-separated list of
    10-digit local numbers. The API reports only overall success.
    """

    name = "fast2sms"
    bulk = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: str = "https://www.fast2sms.com/dev/bulkV2",
        timeout: float = 15.0,
        normalizer: Optional[PhoneNumberNormalizer] = None,
        client: Optional[httpx.Client] = None
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.normalizer = normalizer or PhoneNumberNormalizer()
        self._client = client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self._client.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send_bulk(self, numbers: List[str], message: str) -> str:
        local_numbers = [self.normalizer.to_local(n) for n in numbers]
        payload = {
            "route": "q",
            "message": message,
            "language": "english",
            "flash": 0,
            "numbers": ",".join(local_numbers),
        }

        try:
            response = self._client.post(
                self.url,
                json=payload,
                headers={"authorization": self.api_key}
            )
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Fast2SMS request failed: {e}")
            raise ProviderError(f"Fast2SMS request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Fast2SMS returned a non-JSON response ({response.status_code})")
            raise ProviderError("Invalid response from Fast2SMS") from e

        if not isinstance(result, dict):
            logger.error(f"Fast2SMS returned an unexpected payload: {result!r}")
            raise ProviderError("Invalid response from Fast2SMS")

        if not result.get("return"):
            detail = result.get("message") or "Failed to send SMS"
            if isinstance(detail, list):
                detail = "; ".join(str(d) for d in detail)
            logger.error(f"Fast2SMS rejected batch of {len(local_numbers)}: {detail}")
            raise ProviderError(detail)

        request_id = str(result.get("request_id", ""))
        logger.info(f"Fast2SMS batch of {len(local_numbers)} accepted: {request_id}")
        return request_id


class MockSmsProvider(SmsProvider):
    """
    Provider for development and tests.

    Records messages instead of sending them. Numbers listed in
    ``failing_numbers`` raise ``ProviderError``; a bulk mock with any
    failing number fails the whole batch.
    """

    name = "mock"

    def __init__(
        self,
        configured: bool = True,
        bulk: bool = False,
        failing_numbers: Optional[Set[str]] = None
    ):
        self.configured = configured
        self.bulk = bulk
        self.failing_numbers = set(failing_numbers or ())
        self.sent_messages: List[SentMessage] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def send(self, number: str, message: str) -> str:
        if number in self.failing_numbers:
            raise ProviderError(f"Mock failure for {number}")

        sms = SentMessage(
            to=number,
            body=message,
            provider=self.name,
            message_id=f"MOCK_{len(self.sent_messages)}"
        )
        self.sent_messages.append(sms)
        logger.info(f"[MOCK SMS] To: {number}")
        return sms.message_id

    def send_bulk(self, numbers: List[str], message: str) -> str:
        if self.failing_numbers.intersection(numbers):
            raise ProviderError("Mock batch failure")

        request_id = f"MOCK_BATCH_{len(self.sent_messages)}"
        for number in numbers:
            self.sent_messages.append(
                SentMessage(to=number, body=message, provider=self.name, message_id=request_id)
            )
        logger.info(f"[MOCK SMS] Batch of {len(numbers)}")
        return request_id
