"""
India Disaster Response - Crowdsource Module
Citizen and SMS disaster reports, image verification and submission.
"""

from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    ReportSource,
    ReportStatus,
    ReportStore,
    InMemoryReportStore,
    generate_web_reference,
    generate_sms_reference,
)

__all__ = [
    "DisasterReport",
    "ReportSource",
    "ReportStatus",
    "ReportStore",
    "InMemoryReportStore",
    "generate_web_reference",
    "generate_sms_reference",
]
