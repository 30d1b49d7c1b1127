"""
Disaster report model and storage
Holds citizen and SMS-originated incident reports for the live map
"""

import logging
import random
import string
import threading
import time
from datetime import datetime
from typing import Optional, List, Dict, Any, Callable
from dataclasses import dataclass, field
from enum import Enum

from disaster_response.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


class ReportStatus(Enum):
    """Lifecycle status of a report. Changed only by external moderation."""
    ACTIVE = "active"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


class ReportSource(Enum):
    """Channel a report arrived through."""
    WEB = "web"
    SMS = "sms"


@dataclass
class DisasterReport:
    """
    One reported incident.

    Contains category, severity, location, and reporter details.
    """
    reference_id: str
    type: str
    severity: str

    # Location
    state: str = "Unknown"
    district: str = "Unknown"
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Report details
    description: str = ""
    victim_message: Optional[str] = None
    reporter_contact: Optional[str] = None
    people_affected: Optional[str] = None

    source: ReportSource = ReportSource.WEB
    image_verified: bool = False
    status: ReportStatus = ReportStatus.ACTIVE

    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def location_line(self) -> str:
        """Location, district and state joined, skipping blank or unknown parts."""
        parts = [self.location, self.district, self.state]
        return ", ".join(p for p in parts if p and p != "Unknown")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "reference_id": self.reference_id,
            "type": self.type,
            "severity": self.severity,
            "state": self.state,
            "district": self.district,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
            "victim_message": self.victim_message,
            "reporter_contact": self.reporter_contact,
            "people_affected": self.people_affected,
            "source": self.source.value,
            "image_verified": self.image_verified,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_web_reference(now: Optional[datetime] = None) -> str:
    """Reference code for a web submission, e.g. ``DR-2026-K3J9QX2M1``."""
    year = (now or datetime.utcnow()).year
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"DR-{year}-{suffix}"


def generate_sms_reference(timestamp_ms: Optional[int] = None) -> str:
    """Reference code for an SMS report, built from the millisecond clock."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"DR-SMS-{_to_base36(timestamp_ms)}"


ReportListener = Callable[[DisasterReport], None]


class ReportStore:
    """
    Create/query/subscribe interface over a report backend.

    Subclasses implement ``_save``, ``get`` and ``list_active``;
    listeners registered with ``subscribe`` are called after every create.
    """

    def __init__(self):
        self._listeners: List[ReportListener] = []

    def create(self, report: DisasterReport) -> DisasterReport:
        """
        Persist a new report.

        Raises:
            PersistenceError: If the backend could not store the report
        """
        saved = self._save(report)
        logger.info(f"Report stored: {saved.reference_id} ({saved.type}, {saved.severity})")
        self._notify(saved)
        return saved

    def subscribe(self, listener: ReportListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, report: DisasterReport) -> None:
        for listener in list(self._listeners):
            try:
                listener(report)
            except Exception as e:
                logger.error(f"Report listener failed for {report.reference_id}: {e}")

    def _save(self, report: DisasterReport) -> DisasterReport:
        raise NotImplementedError

    def get(self, reference_id: str) -> Optional[DisasterReport]:
        raise NotImplementedError

    def list_active(self, severity: Optional[str] = None) -> List[DisasterReport]:
        raise NotImplementedError

    def get_statistics(self) -> Dict[str, Any]:
        """Counts of active reports by severity, source and type."""
        reports = self.list_active()

        by_severity: Dict[str, int] = {}
        by_source: Dict[str, int] = {}
        by_type: Dict[str, int] = {}
        image_verified = 0

        for report in reports:
            by_severity[report.severity] = by_severity.get(report.severity, 0) + 1
            by_source[report.source.value] = by_source.get(report.source.value, 0) + 1
            by_type[report.type] = by_type.get(report.type, 0) + 1
            if report.image_verified:
                image_verified += 1

        return {
            "total_active": len(reports),
            "by_severity": by_severity,
            "by_source": by_source,
            "by_type": by_type,
            "image_verified": image_verified,
        }


class InMemoryReportStore(ReportStore):
    """Process-local report store used for development and tests."""

    def __init__(self):
        super().__init__()
        self._reports: Dict[str, DisasterReport] = {}
        self._lock = threading.Lock()

    def _save(self, report: DisasterReport) -> DisasterReport:
        with self._lock:
            if report.reference_id in self._reports:
                raise PersistenceError(f"Duplicate reference id: {report.reference_id}")
            self._reports[report.reference_id] = report
        return report

    def get(self, reference_id: str) -> Optional[DisasterReport]:
        return self._reports.get(reference_id)

    def list_active(self, severity: Optional[str] = None) -> List[DisasterReport]:
        """Active reports, newest first."""
        reports = [
            r for r in self._reports.values()
            if r.status == ReportStatus.ACTIVE
            and (severity is None or r.severity == severity)
        ]
        return sorted(reports, key=lambda r: r.created_at, reverse=True)
