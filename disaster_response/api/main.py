"""
India Disaster Response - REST API

FastAPI application for disaster report intake, the live map feed,
rescue-crew SMS alerts and the inbound SMS webhook.

Run with: uvicorn disaster_response.api.main:app --reload
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, Field

from disaster_response import __version__
from disaster_response.alerts.sms_gateway import SmsGateway, send_alert_request
from disaster_response.core.config import settings
from disaster_response.core.constants import (
    DISASTER_MANAGEMENT_CONTACTS,
    DISASTER_TYPES,
    EMERGENCY_CONTACTS,
    GOVERNMENT_HELPLINES,
    INDIAN_STATES,
    SEVERITY_LEVELS,
    STATE_DISASTER_NUMBERS,
)
from disaster_response.core.exceptions import (
    ConfigurationError,
    ImageRejectedError,
    PersistenceError,
    ValidationError,
)
from disaster_response.core.logging import setup_logging
from disaster_response.crowdsource.image_verifier import ImageVerifier
from disaster_response.crowdsource.inbound_sms import InboundSmsHandler
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    InMemoryReportStore,
    ReportStore,
)
from disaster_response.crowdsource.submission import ReportForm, ReportSubmissionFlow
from disaster_response.visualization.map_generator import create_report_map

setup_logging()

# FastAPI app
app = FastAPI(
    title="India Disaster Response",
    description="Disaster report intake, live map feed and rescue-crew SMS alerts",
    version=__version__,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    sms_provider_configured: bool
    image_verification_configured: bool
    rescue_numbers_configured: int


class AlertSendRequest(BaseModel):
    """Outbound alert request. ``phoneNumber`` is the legacy single-number form."""
    phoneNumbers: Optional[List[str]] = None
    phoneNumber: Optional[str] = None
    message: Optional[str] = None


class AlertOutcomeResponse(BaseModel):
    number: str
    success: bool
    error: Optional[str] = None


class AlertSendResponse(BaseModel):
    """Aggregate fan-out result."""
    success: bool
    sent: int
    total: int
    results: List[AlertOutcomeResponse]
    provider: Optional[str] = None
    error: Optional[str] = None


class ImageVerifyRequest(BaseModel):
    imageBase64: Optional[str] = None
    disasterType: Optional[str] = None


class ImageVerifyResponse(BaseModel):
    isLegitimate: bool
    confidence: str = Field(pattern="^(high|medium|low)$")
    reason: str
    warnings: Optional[List[str]] = None


class ReportCreateRequest(BaseModel):
    """Web report form."""
    type: str = ""
    severity: str = ""
    rescue_numbers: List[str] = Field(default_factory=list)
    state: str = ""
    district: str = ""
    location: str = ""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    description: str = ""
    victim_message: Optional[str] = None
    reporter_contact: Optional[str] = None
    people_affected: Optional[str] = None
    image_base64: Optional[str] = None


class ReportResponse(BaseModel):
    """Disaster report."""
    reference_id: str
    type: str
    severity: str
    state: str
    district: str
    location: str
    latitude: Optional[float]
    longitude: Optional[float]
    description: str
    victim_message: Optional[str]
    reporter_contact: Optional[str]
    people_affected: Optional[str]
    source: str
    image_verified: bool
    status: str
    created_at: Optional[str]


class ReportListResponse(BaseModel):
    """Active reports, newest first."""
    count: int
    reports: List[ReportResponse]


class SubmissionResponse(BaseModel):
    """Web submission result."""
    success: bool
    reference_id: str
    report: ReportResponse
    verification: Optional[ImageVerifyResponse] = None
    alert: Optional[AlertSendResponse] = None
    alert_error: Optional[str] = None


class ReportStatsResponse(BaseModel):
    total_active: int
    by_severity: Dict[str, int]
    by_source: Dict[str, int]
    by_type: Dict[str, int]
    image_verified: int


# ============================================================================
# Service Instances
# ============================================================================

def _build_store() -> ReportStore:
    if settings.database_url:
        from disaster_response.database.connection import init_db
        from disaster_response.database.report_store import SqlReportStore

        return SqlReportStore(init_db(settings.database_url))
    return InMemoryReportStore()


# Global instances for stateful services
_report_store = _build_store()
_sms_gateway = SmsGateway.from_settings(settings)
_image_verifier = ImageVerifier(
    api_key=settings.ai_gateway_api_key,
    url=settings.ai_gateway_url,
    model=settings.ai_model,
    timeout=settings.verification_timeout_seconds,
)


def get_report_store() -> ReportStore:
    return _report_store


def get_sms_gateway() -> SmsGateway:
    return _sms_gateway


def get_image_verifier() -> ImageVerifier:
    return _image_verifier


def get_rescue_numbers() -> List[str]:
    return settings.rescue_numbers


def _report_response(report: DisasterReport) -> ReportResponse:
    return ReportResponse(**report.to_dict())


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(
    gateway: SmsGateway = Depends(get_sms_gateway),
    verifier: ImageVerifier = Depends(get_image_verifier),
    rescue_numbers: List[str] = Depends(get_rescue_numbers),
):
    """Check API health and which external services are configured."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow().isoformat(),
        sms_provider_configured=any(p.is_configured for p in gateway.providers),
        image_verification_configured=verifier.is_configured,
        rescue_numbers_configured=len(rescue_numbers),
    )


# ============================================================================
# Alert Routes
# ============================================================================

@app.post("/api/v1/alerts/send", response_model=AlertSendResponse, tags=["Alerts"])
def send_alert(
    request: AlertSendRequest,
    gateway: SmsGateway = Depends(get_sms_gateway),
):
    """
    Send one alert message to one or more rescue numbers.

    Invalid numbers are dropped. ``success`` is true when at least one
    message was sent.
    """
    try:
        result = send_alert_request(gateway, request.model_dump())
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "sent": 0, "total": 0, "results": [], "error": str(e)},
        )
    except ConfigurationError as e:
        return JSONResponse(
            status_code=500,
            content={"success": False, "sent": 0, "total": 0, "results": [], "error": str(e)},
        )

    return result.to_dict()


@app.post("/api/v1/sms/inbound", tags=["Alerts"])
def receive_sms(
    sender: Optional[str] = Form(default=None, alias="From"),
    body: Optional[str] = Form(default=None, alias="Body"),
    message_sid: Optional[str] = Form(default=None, alias="MessageSid"),
    store: ReportStore = Depends(get_report_store),
    gateway: SmsGateway = Depends(get_sms_gateway),
    rescue_numbers: List[str] = Depends(get_rescue_numbers),
):
    """
    Twilio inbound SMS webhook.

    Message format: ``TYPE|LOCATION|DESCRIPTION``. Always answers with TwiML.
    """
    handler = InboundSmsHandler(store=store, gateway=gateway, rescue_numbers=rescue_numbers)
    twiml = handler.handle(sender, body, message_sid)
    return Response(content=twiml, media_type="text/xml")


# ============================================================================
# Image Verification Routes
# ============================================================================

@app.post("/api/v1/images/verify", response_model=ImageVerifyResponse, tags=["Verification"])
def verify_image(
    request: ImageVerifyRequest,
    verifier: ImageVerifier = Depends(get_image_verifier),
):
    """
    Check whether a photo shows a real emergency.

    Service outages yield a low-confidence pass rather than an error.
    """
    if not request.imageBase64:
        raise HTTPException(status_code=400, detail="No image provided")

    result = verifier.verify_or_allow(request.imageBase64, request.disasterType)
    return result.to_dict()


# ============================================================================
# Report Routes
# ============================================================================

@app.post("/api/v1/reports", response_model=SubmissionResponse, status_code=201, tags=["Reports"])
def create_report(
    request: ReportCreateRequest,
    store: ReportStore = Depends(get_report_store),
    gateway: SmsGateway = Depends(get_sms_gateway),
    verifier: ImageVerifier = Depends(get_image_verifier),
):
    """
    Submit a disaster report from the web form.

    The report is stored and alerted to the given rescue numbers. An attached
    image is checked first; a rejected image blocks the submission.
    """
    flow = ReportSubmissionFlow(
        store=store,
        gateway=gateway,
        verifier=verifier,
        severity_levels=SEVERITY_LEVELS.keys(),
    )

    try:
        result = flow.submit(ReportForm(**request.model_dump()))
    except ImageRejectedError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "Image verification failed", "reason": e.reason, "warnings": e.warnings},
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return result.to_dict()


@app.get("/api/v1/reports", response_model=ReportListResponse, tags=["Reports"])
def list_reports(
    severity: Optional[str] = Query(default=None, pattern="^(low|medium|high|critical)$"),
    limit: int = Query(default=100, ge=1, le=1000),
    store: ReportStore = Depends(get_report_store),
):
    """Active reports for the live map, newest first."""
    try:
        reports = store.list_active(severity=severity)[:limit]
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ReportListResponse(
        count=len(reports),
        reports=[_report_response(r) for r in reports],
    )


@app.get("/api/v1/reports/stats/summary", response_model=ReportStatsResponse, tags=["Reports"])
def get_report_stats(store: ReportStore = Depends(get_report_store)):
    """Counts of active reports by severity, source and type."""
    try:
        return store.get_statistics()
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/v1/reports/{reference_id}", response_model=ReportResponse, tags=["Reports"])
def get_report(reference_id: str, store: ReportStore = Depends(get_report_store)):
    """Get a report by reference code."""
    try:
        report = store.get(reference_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not report:
        raise HTTPException(status_code=404, detail=f"Report {reference_id} not found")
    return _report_response(report)


# ============================================================================
# Map Routes
# ============================================================================

@app.get("/api/v1/map/reports", response_class=HTMLResponse, tags=["Map"])
def get_reports_map(
    severity: Optional[str] = Query(default=None, pattern="^(low|medium|high|critical)$"),
    store: ReportStore = Depends(get_report_store),
):
    """Interactive map of active reports, coloured by severity."""
    try:
        reports = store.list_active(severity=severity)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return create_report_map(reports)._repr_html_()


# ============================================================================
# Reference Data Routes
# ============================================================================

@app.get("/api/v1/contacts", tags=["Reference"])
async def get_contacts() -> Dict[str, Any]:
    """Emergency helplines and state disaster numbers."""
    return {
        "emergency": EMERGENCY_CONTACTS,
        "government_helplines": GOVERNMENT_HELPLINES,
        "disaster_management": DISASTER_MANAGEMENT_CONTACTS,
        "state_numbers": STATE_DISASTER_NUMBERS,
    }


@app.get("/api/v1/reference", tags=["Reference"])
async def get_reference_data() -> Dict[str, Any]:
    """Allowed values for the report form."""
    return {
        "disaster_types": DISASTER_TYPES,
        "severity_levels": SEVERITY_LEVELS,
        "states": INDIAN_STATES,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
