"""
Pytest configuration and fixtures
"""
import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from disaster_response.alerts.sms_gateway import SmsGateway
from disaster_response.alerts.sms_providers import MockSmsProvider
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    InMemoryReportStore,
    ReportSource,
)


@pytest.fixture
def sample_report():
    """Fully populated web report."""
    return DisasterReport(
        reference_id="DR-2026-ABC123XYZ",
        type="flood",
        severity="critical",
        state="Maharashtra",
        district="Mumbai",
        location="Andheri East",
        latitude=19.1136,
        longitude=72.8697,
        description="Water level rising fast near the station",
        victim_message="We are on the second floor, please send a boat",
        reporter_contact="9876543210",
        people_affected="50",
        source=ReportSource.WEB,
        created_at=datetime(2026, 7, 14, 9, 30),
    )


@pytest.fixture
def sms_report():
    """Report as created from an inbound SMS."""
    return DisasterReport(
        reference_id="DR-SMS-MD2K9Q1A",
        type="landslide",
        severity="high",
        location="Wayanad, Kerala",
        description="Road blocked, houses buried",
        victim_message="LANDSLIDE|Wayanad, Kerala|Road blocked, houses buried",
        reporter_contact="+919812345678",
        source=ReportSource.SMS,
        created_at=datetime(2026, 7, 30, 2, 15),
    )


@pytest.fixture
def report_store():
    return InMemoryReportStore()


@pytest.fixture
def mock_provider():
    return MockSmsProvider()


@pytest.fixture
def gateway(mock_provider):
    return SmsGateway([mock_provider])


@pytest.fixture
def rescue_numbers():
    return ["9876543210", "+91 81234 56789", "invalid"]
