"""
Web report submission

Validates a report form, checks an attached photo, stores the report and
alerts the rescue numbers the reporter chose.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from disaster_response.alerts.message_composer import compose_web_alert
from disaster_response.alerts.sms_gateway import GatewayResult, SmsGateway
from disaster_response.core.constants import MAX_WEB_RECIPIENTS, SEVERITY_LEVELS
from disaster_response.core.exceptions import (
    ConfigurationError,
    ImageRejectedError,
    RecipientValidationError,
    ReportValidationError,
)
from disaster_response.core.phone import PhoneNumberNormalizer
from disaster_response.crowdsource.image_verifier import ImageVerifier, VerificationResult
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    ReportSource,
    ReportStore,
    generate_web_reference,
)

logger = logging.getLogger(__name__)


@dataclass
class ReportForm:
    """Fields of the web report form."""
    type: str
    severity: str
    rescue_numbers: List[str] = field(default_factory=list)
    state: str = ""
    district: str = ""
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: str = ""
    victim_message: Optional[str] = None
    reporter_contact: Optional[str] = None
    people_affected: Optional[str] = None
    image_base64: Optional[str] = None


@dataclass
class SubmissionResult:
    """Outcome of a web submission."""
    report: DisasterReport
    verification: Optional[VerificationResult] = None
    alert: Optional[GatewayResult] = None
    alert_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.alert is not None and self.alert.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "reference_id": self.report.reference_id,
            "report": self.report.to_dict(),
            "verification": self.verification.to_dict() if self.verification else None,
            "alert": self.alert.to_dict() if self.alert else None,
            "alert_error": self.alert_error,
        }


class ReportSubmissionFlow:
    """
    Orchestrates the web submission path.

    Order: validate fields, validate recipients, verify image (only when
    one is attached), persist, then fan out.
    """

    def __init__(
        self,
        store: ReportStore,
        gateway: SmsGateway,
        verifier: Optional[ImageVerifier] = None,
        severity_levels: Iterable[str] = SEVERITY_LEVELS,
        max_recipients: int = MAX_WEB_RECIPIENTS,
        normalizer: Optional[PhoneNumberNormalizer] = None
    ):
        self.store = store
        self.gateway = gateway
        self.verifier = verifier
        self.severity_levels = set(severity_levels)
        self.max_recipients = max_recipients
        self.normalizer = normalizer or PhoneNumberNormalizer()

    def validate_form(self, form: ReportForm) -> None:
        """
        Raises:
            ReportValidationError: If type or severity is missing or invalid
        """
        if not form.type or not form.type.strip():
            raise ReportValidationError("Disaster type is required")
        if not form.severity or not form.severity.strip():
            raise ReportValidationError("Severity is required")
        if form.severity.strip().lower() not in self.severity_levels:
            raise ReportValidationError(
                f"Invalid severity '{form.severity}'. "
                f"Expected one of: {', '.join(sorted(self.severity_levels))}"
            )

    def validate_recipients(self, numbers: List[str]) -> List[str]:
        """
        Keep the valid rescue numbers.

        Raises:
            RecipientValidationError: If none are valid or too many were given
        """
        entries = [n for n in numbers if n and n.strip()]
        if len(entries) > self.max_recipients:
            raise RecipientValidationError(
                f"At most {self.max_recipients} rescue numbers may be given"
            )

        valid = [n for n in entries if self.normalizer.is_valid(n)]
        if not valid:
            raise RecipientValidationError(
                "Please enter at least one valid 10-digit Indian mobile number"
            )
        return valid

    def verify_image(self, form: ReportForm) -> VerificationResult:
        """
        Check the attached photo.

        Raises:
            ImageRejectedError: If the verifier judged the photo not legitimate
        """
        if self.verifier is None:
            logger.warning("Image attached but no verifier configured")
            result = VerificationResult.soft_pass(
                "Image could not be verified, proceeding without AI check",
                "AI verification not configured",
            )
        else:
            result = self.verifier.verify_or_allow(form.image_base64, form.type)

        if not result.is_legitimate:
            logger.info(f"Submission blocked by image verification: {result.reason}")
            raise ImageRejectedError(result.reason, result.warnings)
        return result

    def build_report(self, form: ReportForm, image_verified: bool) -> DisasterReport:
        return DisasterReport(
            reference_id=generate_web_reference(),
            type=form.type.strip().lower(),
            severity=form.severity.strip().lower(),
            state=form.state or "Unknown",
            district=form.district or "Unknown",
            location=form.location,
            latitude=form.latitude,
            longitude=form.longitude,
            description=form.description,
            victim_message=form.victim_message or None,
            reporter_contact=form.reporter_contact or None,
            people_affected=form.people_affected or None,
            source=ReportSource.WEB,
            image_verified=image_verified,
        )

    def submit(self, form: ReportForm) -> SubmissionResult:
        """
        Run the full submission.

        Args:
            form: Submitted form

        Returns:
            SubmissionResult; an unconfigured SMS service is reported in
            ``alert_error`` after the report has been saved

        Raises:
            ReportValidationError: Missing or invalid required fields
            RecipientValidationError: No valid rescue number
            ImageRejectedError: Attached photo rejected
            PersistenceError: Report could not be stored
        """
        self.validate_form(form)
        recipients = self.validate_recipients(form.rescue_numbers)

        verification = None
        if form.image_base64:
            verification = self.verify_image(form)

        image_verified = verification is not None and verification.confidence != "low"
        report = self.build_report(form, image_verified)
        message = compose_web_alert(report, image_verified=image_verified)

        self.store.create(report)

        result = SubmissionResult(report=report, verification=verification)
        try:
            result.alert = self.gateway.send(recipients, message)
        except (ConfigurationError, RecipientValidationError) as e:
            logger.error(f"Alert for {report.reference_id} not sent: {e}")
            result.alert_error = str(e)

        logger.info(
            f"Report {report.reference_id} submitted; "
            f"alerts sent: {result.alert.sent if result.alert else 0}/{len(recipients)}"
        )
        return result
