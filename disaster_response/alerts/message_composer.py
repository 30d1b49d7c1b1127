"""
Alert message templates for rescue-crew SMS
"""

from typing import List

from disaster_response.core.constants import NATIONAL_EMERGENCY_NUMBER
from disaster_response.crowdsource.report_handler import DisasterReport

SIGN_OFF = "- India Disaster Response"

# Victim text carried in relayed SMS alerts
RELAY_MESSAGE_LIMIT = 100


def compose_web_alert(report: DisasterReport, image_verified: bool = False) -> str:
    """
    Build the alert sent for a web form submission.

    Optional fields are left out entirely when absent.

    Args:
        report: Submitted report
        image_verified: Whether an attached photo passed AI verification

    Returns:
        Multi-line alert text
    """
    lines: List[str] = [
        "🚨 DISASTER ALERT 🚨",
        f"Type: {report.type.upper()}",
        f"Severity: {report.severity.upper()}",
    ]

    location = report.location_line()
    if location:
        lines.append(f"Location: {location}")

    lines.append(f"People Affected: {report.people_affected or 'Unknown'}")

    if report.description:
        lines.append(f"Details: {report.description}")
    if report.victim_message:
        lines.append(f"Victim Message: {report.victim_message}")
    if report.reporter_contact:
        lines.append(f"Contact: {report.reporter_contact}")
    if image_verified:
        lines.append("✅ Image verified by AI")

    lines.append(f"Ref: {report.reference_id}")
    lines.append(SIGN_OFF)

    return "\n".join(lines)


def compose_sms_relay_alert(report: DisasterReport) -> str:
    """Build the alert relayed to rescue crews for an SMS-originated report."""
    victim_text = (report.victim_message or "")[:RELAY_MESSAGE_LIMIT]

    return (
        f"🚨 DISASTER ALERT 🚨\n"
        f"Type: {report.type.upper()}\n"
        f"Location: {report.location}\n"
        f"From: {report.reporter_contact or 'Unknown'}\n"
        f"Message: {victim_text}\n"
        f"Ref: {report.reference_id}\n"
        f"{SIGN_OFF}"
    )


def compose_acknowledgment(reference_id: str) -> str:
    """Reply text sent back to an SMS reporter."""
    return (
        f"Alert received. Reference: {reference_id}. Help is on the way. "
        f"For immediate emergency, call {NATIONAL_EMERGENCY_NUMBER}."
    )
