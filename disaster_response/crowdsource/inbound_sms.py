"""
Inbound SMS reports

Turns a Twilio webhook message of the form ``TYPE|LOCATION|DESCRIPTION``
into a stored report, relays it to the configured rescue crews, and
answers the sender with a TwiML acknowledgment.
"""

import logging
from typing import Callable, List, Optional

from twilio.twiml.messaging_response import MessagingResponse

from disaster_response.alerts.message_composer import (
    compose_acknowledgment,
    compose_sms_relay_alert,
)
from disaster_response.alerts.sms_gateway import GatewayResult, SmsGateway
from disaster_response.core.constants import SMS_DEFAULT_SEVERITY
from disaster_response.core.exceptions import (
    ConfigurationError,
    PersistenceError,
    RecipientValidationError,
)
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    ReportSource,
    ReportStatus,
    ReportStore,
    generate_sms_reference,
)

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "|"
UNKNOWN_TYPE = "unknown"
UNKNOWN_LOCATION = "Location not specified"
UNKNOWN_REGION = "Unknown"


def parse_body(body: str, sender: Optional[str], reference_id: str) -> DisasterReport:
    """
    Build a report from an SMS body.

    Missing or blank segments fall back to placeholders; the description
    falls back to the whole message. A body without any delimiter is
    treated as free text, not as a type.

    Args:
        body: Raw message text
        sender: Sender phone number as given by the webhook
        reference_id: Reference code for the new report

    Returns:
        Unsaved DisasterReport
    """
    parts = [p.strip() for p in body.split(FIELD_DELIMITER)]
    if len(parts) == 1:
        # Free text with no fields: nothing to classify
        parts = []

    def part(index: int) -> str:
        return parts[index] if len(parts) > index else ""

    return DisasterReport(
        reference_id=reference_id,
        type=part(0).lower() or UNKNOWN_TYPE,
        severity=SMS_DEFAULT_SEVERITY,
        state=UNKNOWN_REGION,
        district=UNKNOWN_REGION,
        location=part(1) or UNKNOWN_LOCATION,
        description=part(2) or body,
        victim_message=body,
        reporter_contact=sender,
        source=ReportSource.SMS,
        status=ReportStatus.ACTIVE,
    )


def empty_response() -> str:
    """TwiML document with no reply message."""
    return str(MessagingResponse())


class InboundSmsHandler:
    """
    Processes one inbound SMS webhook call at a time.

    Always produces a TwiML document. Once a reference code exists the
    sender gets the acknowledgment even if storage or the relay fails;
    those failures are logged and never returned to the sender.
    """

    def __init__(
        self,
        store: ReportStore,
        gateway: SmsGateway,
        rescue_numbers: List[str],
        reference_factory: Callable[[], str] = generate_sms_reference
    ):
        """
        Initialize handler.

        Args:
            store: Report store new reports are created in
            gateway: SMS gateway for the rescue-crew relay
            rescue_numbers: Numbers alerted for every SMS report
            reference_factory: Produces reference codes
        """
        self.store = store
        self.gateway = gateway
        self.rescue_numbers = list(rescue_numbers)
        self.reference_factory = reference_factory

    def handle(
        self,
        sender: Optional[str],
        body: Optional[str],
        message_sid: Optional[str] = None
    ) -> str:
        """
        Handle a webhook payload and return the TwiML reply.

        Args:
            sender: ``From`` field
            body: ``Body`` field
            message_sid: ``MessageSid`` field

        Returns:
            TwiML XML string
        """
        if not body or not body.strip():
            logger.info(f"Empty SMS received from {sender} ({message_sid})")
            return empty_response()

        logger.info(f"SMS from {sender} ({message_sid}): {body[:50]}...")

        try:
            report = parse_body(body, sender, self.reference_factory())
        except Exception as e:
            logger.exception(f"Error parsing SMS {message_sid}: {e}")
            return empty_response()

        try:
            self.store.create(report)
        except PersistenceError as e:
            logger.error(f"Failed to store SMS report {report.reference_id}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error storing SMS report {report.reference_id}: {e}")
        else:
            try:
                self.relay(report)
            except Exception as e:
                logger.exception(f"Rescue relay failed for {report.reference_id}: {e}")

        response = MessagingResponse()
        response.message(compose_acknowledgment(report.reference_id))
        return str(response)

    def relay(self, report: DisasterReport) -> Optional[GatewayResult]:
        """Send the relay alert to the configured rescue crews."""
        if not self.rescue_numbers:
            logger.warning("No rescue crew numbers configured; SMS report not relayed")
            return None

        try:
            return self.gateway.send(self.rescue_numbers, compose_sms_relay_alert(report))
        except (ConfigurationError, RecipientValidationError) as e:
            logger.warning(f"Rescue relay skipped for {report.reference_id}: {e}")
            return None
