"""
India Disaster Response - Database Module
SQLAlchemy persistence for disaster reports.
"""

from disaster_response.database.models import Base, DisasterReportRecord
from disaster_response.database.connection import DatabaseConnection, init_db
from disaster_response.database.report_store import SqlReportStore

__all__ = [
    "Base",
    "DisasterReportRecord",
    "DatabaseConnection",
    "init_db",
    "SqlReportStore",
]
