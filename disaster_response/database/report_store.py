"""
SQL-backed report store
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from disaster_response.core.exceptions import PersistenceError
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    ReportStatus,
    ReportStore,
)
from disaster_response.database.connection import DatabaseConnection
from disaster_response.database.models import DisasterReportRecord

logger = logging.getLogger(__name__)


class SqlReportStore(ReportStore):
    """Report store on the ``disaster_reports`` table."""

    def __init__(self, db: DatabaseConnection):
        super().__init__()
        self.db = db

    def _save(self, report: DisasterReport) -> DisasterReport:
        try:
            with self.db.get_session() as session:
                session.add(DisasterReportRecord.from_report(report))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to insert report {report.reference_id}: {e}") from e
        return report

    def get(self, reference_id: str) -> Optional[DisasterReport]:
        try:
            with self.db.get_session() as session:
                record = session.scalars(
                    select(DisasterReportRecord).where(
                        DisasterReportRecord.reference_id == reference_id
                    )
                ).first()
                return record.to_report() if record else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load report {reference_id}: {e}") from e

    def list_active(self, severity: Optional[str] = None) -> List[DisasterReport]:
        """Active reports, newest first."""
        query = select(DisasterReportRecord).where(
            DisasterReportRecord.status == ReportStatus.ACTIVE.value
        )
        if severity:
            query = query.where(DisasterReportRecord.severity == severity)
        query = query.order_by(DisasterReportRecord.created_at.desc())

        try:
            with self.db.get_session() as session:
                return [record.to_report() for record in session.scalars(query)]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list reports: {e}") from e
