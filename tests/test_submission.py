"""
Tests for the web report submission flow
"""
import re

import httpx
import pytest
from unittest.mock import MagicMock

from disaster_response.alerts.sms_gateway import SmsGateway
from disaster_response.alerts.sms_providers import MockSmsProvider
from disaster_response.core.exceptions import (
    ImageRejectedError,
    PersistenceError,
    RecipientValidationError,
    ReportValidationError,
)
from disaster_response.crowdsource.image_verifier import ImageVerifier, VerificationResult
from disaster_response.crowdsource.report_handler import InMemoryReportStore, ReportSource
from disaster_response.crowdsource.submission import ReportForm, ReportSubmissionFlow


class FailingStore(InMemoryReportStore):
    def _save(self, report):
        raise PersistenceError("database unavailable")


def make_form(**overrides):
    fields = dict(
        type="Flood",
        severity="critical",
        rescue_numbers=["9876543210", "invalid"],
        state="Assam",
        district="Kamrup",
        location="Guwahati",
        description="River breached the embankment",
        people_affected="200",
    )
    fields.update(overrides)
    return ReportForm(**fields)


class TestReportSubmissionFlow:
    """Test suite for web submission orchestration."""

    def setup_method(self):
        self.store = InMemoryReportStore()
        self.provider = MockSmsProvider()
        self.gateway = SmsGateway([self.provider])
        self.verifier = MagicMock(spec=ImageVerifier)
        self.flow = ReportSubmissionFlow(self.store, self.gateway, self.verifier)

    def test_successful_submission(self):
        result = self.flow.submit(make_form())

        assert result.success
        assert result.alert.sent == 1
        assert result.alert.total == 1
        assert re.match(r"^DR-\d{4}-[0-9A-Z]{9}$", result.report.reference_id)
        stored = self.store.get(result.report.reference_id)
        assert stored.type == "flood"
        assert stored.source == ReportSource.WEB
        assert "Type: FLOOD" in self.provider.sent_messages[0].body

    def test_no_image_skips_verification(self):
        result = self.flow.submit(make_form())

        self.verifier.verify_or_allow.assert_not_called()
        assert result.verification is None
        assert not result.report.image_verified

    def test_missing_type(self):
        with pytest.raises(ReportValidationError):
            self.flow.submit(make_form(type=" "))
        assert self.provider.sent_messages == []

    def test_missing_severity(self):
        with pytest.raises(ReportValidationError):
            self.flow.submit(make_form(severity=""))

    def test_unknown_severity(self):
        with pytest.raises(ReportValidationError):
            self.flow.submit(make_form(severity="apocalyptic"))

    def test_no_valid_recipient(self):
        with pytest.raises(RecipientValidationError):
            self.flow.submit(make_form(rescue_numbers=["123", ""]))
        assert self.store.list_active() == []

    def test_too_many_recipients(self):
        numbers = ["9876543210"] * 6
        with pytest.raises(RecipientValidationError):
            self.flow.submit(make_form(rescue_numbers=numbers))

    def test_rejected_image_blocks_submission(self):
        self.verifier.verify_or_allow.return_value = VerificationResult(
            is_legitimate=False, confidence="high", reason="Screenshot from a film"
        )

        with pytest.raises(ImageRejectedError) as exc_info:
            self.flow.submit(make_form(image_base64="aGVsbG8="))

        assert exc_info.value.reason == "Screenshot from a film"
        assert self.store.list_active() == []
        assert self.provider.sent_messages == []

    def test_verified_image(self):
        self.verifier.verify_or_allow.return_value = VerificationResult(
            is_legitimate=True, confidence="high", reason="Flooded houses"
        )

        result = self.flow.submit(make_form(image_base64="aGVsbG8="))

        self.verifier.verify_or_allow.assert_called_once_with("aGVsbG8=", "Flood")
        assert result.report.image_verified
        assert "Image verified by AI" in self.provider.sent_messages[0].body

    def test_verification_outage_does_not_block(self):
        def handler(request):
            raise httpx.ConnectError("unreachable")

        verifier = ImageVerifier(api_key="key", client=httpx.Client(transport=httpx.MockTransport(handler)))
        flow = ReportSubmissionFlow(self.store, self.gateway, verifier)

        result = flow.submit(make_form(image_base64="aGVsbG8="))

        assert result.success
        assert result.verification.confidence == "low"
        assert not result.report.image_verified

    def test_unconfigured_sms_reported_after_save(self):
        flow = ReportSubmissionFlow(self.store, SmsGateway([MockSmsProvider(configured=False)]))

        result = flow.submit(make_form())

        assert not result.success
        assert result.alert is None
        assert "not configured" in result.alert_error
        assert self.store.get(result.report.reference_id) is not None

    def test_persistence_failure_raises(self):
        flow = ReportSubmissionFlow(FailingStore(), self.gateway)

        with pytest.raises(PersistenceError):
            flow.submit(make_form())
        assert self.provider.sent_messages == []

    def test_injected_severity_levels(self):
        flow = ReportSubmissionFlow(self.store, self.gateway, severity_levels=["minor", "major"])

        with pytest.raises(ReportValidationError):
            flow.submit(make_form(severity="critical"))
        assert flow.submit(make_form(severity="major")).success
