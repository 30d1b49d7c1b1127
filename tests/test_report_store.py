"""
Tests for report storage
"""
import re
from datetime import datetime

import pytest

from disaster_response.core.exceptions import PersistenceError
from disaster_response.crowdsource.report_handler import (
    DisasterReport,
    InMemoryReportStore,
    ReportSource,
    ReportStatus,
    generate_sms_reference,
    generate_web_reference,
)
from disaster_response.database.connection import DatabaseConnection
from disaster_response.database.report_store import SqlReportStore


def make_report(reference_id, severity="high", created_at=None, **kwargs):
    return DisasterReport(
        reference_id=reference_id,
        type=kwargs.pop("type", "flood"),
        severity=severity,
        created_at=created_at or datetime(2026, 8, 1, 12, 0),
        **kwargs
    )


class TestReferenceCodes:
    """Test suite for reference code generation."""

    def test_web_reference(self):
        reference = generate_web_reference(datetime(2026, 3, 5))
        assert re.match(r"^DR-2026-[0-9A-Z]{9}$", reference)

    def test_sms_reference_is_base36_timestamp(self):
        assert generate_sms_reference(36 ** 3) == "DR-SMS-1000"
        assert generate_sms_reference(35) == "DR-SMS-Z"


class TestInMemoryReportStore:
    """Test suite for the in-memory store."""

    def setup_method(self):
        self.store = InMemoryReportStore()

    def test_create_and_get(self, sample_report):
        self.store.create(sample_report)
        assert self.store.get(sample_report.reference_id) is sample_report

    def test_duplicate_reference(self, sample_report):
        self.store.create(sample_report)
        with pytest.raises(PersistenceError):
            self.store.create(sample_report)

    def test_list_active_newest_first(self):
        self.store.create(make_report("A", created_at=datetime(2026, 8, 1)))
        self.store.create(make_report("B", created_at=datetime(2026, 8, 3)))
        self.store.create(make_report("C", created_at=datetime(2026, 8, 2)))

        assert [r.reference_id for r in self.store.list_active()] == ["B", "C", "A"]

    def test_list_active_excludes_resolved(self):
        self.store.create(make_report("A"))
        self.store.create(make_report("B", status=ReportStatus.RESOLVED))

        assert [r.reference_id for r in self.store.list_active()] == ["A"]

    def test_severity_filter(self):
        self.store.create(make_report("A", severity="low"))
        self.store.create(make_report("B", severity="critical"))

        assert [r.reference_id for r in self.store.list_active(severity="critical")] == ["B"]

    def test_subscribe_and_unsubscribe(self):
        seen = []
        unsubscribe = self.store.subscribe(lambda report: seen.append(report.reference_id))

        self.store.create(make_report("A"))
        unsubscribe()
        self.store.create(make_report("B"))

        assert seen == ["A"]

    def test_failing_listener_does_not_break_create(self):
        def listener(report):
            raise RuntimeError("listener crashed")

        self.store.subscribe(listener)
        self.store.create(make_report("A"))

        assert self.store.get("A") is not None

    def test_statistics(self):
        self.store.create(make_report("A", severity="high", source=ReportSource.SMS))
        self.store.create(make_report("B", severity="high", image_verified=True))
        self.store.create(make_report("C", severity="low", type="fire"))

        stats = self.store.get_statistics()

        assert stats["total_active"] == 3
        assert stats["by_severity"] == {"high": 2, "low": 1}
        assert stats["by_source"] == {"sms": 1, "web": 2}
        assert stats["by_type"] == {"flood": 2, "fire": 1}
        assert stats["image_verified"] == 1


class TestSqlReportStore:
    """Test suite for the SQLAlchemy store."""

    @pytest.fixture(autouse=True)
    def setup_db(self, tmp_path):
        self.db = DatabaseConnection(f"sqlite:///{tmp_path / 'reports.db'}")
        self.db.create_tables()
        self.store = SqlReportStore(self.db)
        yield
        self.db.close()

    def test_round_trip(self, sample_report):
        self.store.create(sample_report)
        loaded = self.store.get(sample_report.reference_id)

        assert loaded.to_dict() == sample_report.to_dict()

    def test_missing_report(self):
        assert self.store.get("DR-NOPE") is None

    def test_duplicate_reference(self, sample_report):
        self.store.create(sample_report)
        with pytest.raises(PersistenceError):
            self.store.create(sample_report)

    def test_list_active_order_and_filter(self):
        self.store.create(make_report("A", severity="low", created_at=datetime(2026, 8, 1)))
        self.store.create(make_report("B", severity="high", created_at=datetime(2026, 8, 3)))
        self.store.create(make_report("C", severity="high", created_at=datetime(2026, 8, 2)))
        self.store.create(make_report("D", status=ReportStatus.MONITORING))

        assert [r.reference_id for r in self.store.list_active()] == ["B", "C", "A"]
        assert [r.reference_id for r in self.store.list_active(severity="high")] == ["B", "C"]

    def test_listeners_notified(self, sms_report):
        seen = []
        self.store.subscribe(seen.append)

        self.store.create(sms_report)

        assert seen[0].reference_id == sms_report.reference_id

    def test_connection_check(self):
        assert self.db.check_connection()
