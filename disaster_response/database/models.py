"""
SQLAlchemy models for India Disaster Response
"""

from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Text, Boolean, DateTime, Index
from sqlalchemy.orm import declarative_base

from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    ReportSource,
    ReportStatus,
)

Base = declarative_base()


class DisasterReportRecord(Base):
    """
    Stored disaster report.

    ``status`` is only ever written as ``active`` here; moderation tools
    change it outside this service.
    """
    __tablename__ = "disaster_reports"

    id = Column(Integer, primary_key=True)
    reference_id = Column(String(40), unique=True, nullable=False)
    type = Column(String(100), nullable=False)
    severity = Column(String(20), nullable=False)

    state = Column(String(100), default="Unknown")
    district = Column(String(100), default="Unknown")
    location = Column(Text, default="")
    latitude = Column(Float)
    longitude = Column(Float)

    description = Column(Text, default="")
    victim_message = Column(Text)
    reporter_contact = Column(String(50))
    people_affected = Column(String(50))

    source = Column(String(10), nullable=False, default=ReportSource.WEB.value)
    image_verified = Column(Boolean, default=False)
    status = Column(String(20), nullable=False, default=ReportStatus.ACTIVE.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_report_status_created", "status", "created_at"),
        Index("idx_report_severity", "severity"),
    )

    @classmethod
    def from_report(cls, report: DisasterReport) -> "DisasterReportRecord":
        return cls(
            reference_id=report.reference_id,
            type=report.type,
            severity=report.severity,
            state=report.state,
            district=report.district,
            location=report.location,
            latitude=report.latitude,
            longitude=report.longitude,
            description=report.description,
            victim_message=report.victim_message,
            reporter_contact=report.reporter_contact,
            people_affected=report.people_affected,
            source=report.source.value,
            image_verified=report.image_verified,
            status=report.status.value,
            created_at=report.created_at,
        )

    def to_report(self) -> DisasterReport:
        return DisasterReport(
            reference_id=self.reference_id,
            type=self.type,
            severity=self.severity,
            state=self.state,
            district=self.district,
            location=self.location or "",
            latitude=self.latitude,
            longitude=self.longitude,
            description=self.description or "",
            victim_message=self.victim_message,
            reporter_contact=self.reporter_contact,
            people_affected=self.people_affected,
            source=ReportSource(self.source),
            image_verified=bool(self.image_verified),
            status=ReportStatus(self.status),
            created_at=self.created_at,
        )

    def __repr__(self):
        return f"<DisasterReportRecord({self.reference_id}, {self.type}, {self.severity})>"
