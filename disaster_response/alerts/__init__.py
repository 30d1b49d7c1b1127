"""
India Disaster Response - Alerts Module
Rescue-crew SMS alerting: message templates, providers and fan-out.
"""

from disaster_response.alerts.sms_gateway import (
    AlertOutcome,
    GatewayResult,
    SmsGateway,
    send_alert_request,
)
from disaster_response.alerts.sms_providers import (
    SmsProvider,
    TwilioSmsProvider,
    Fast2SmsProvider,
    MockSmsProvider,
)

__all__ = [
    "AlertOutcome",
    "GatewayResult",
    "SmsGateway",
    "send_alert_request",
    "SmsProvider",
    "TwilioSmsProvider",
    "Fast2SmsProvider",
    "MockSmsProvider",
]
