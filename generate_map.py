#!/usr/bin/env python3
"""
India Disaster Response - Generate Report Map
Loads active reports from the database and writes an interactive map.
"""
import os
import sys
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from disaster_response.core.config import settings
from disaster_response.database.connection import DatabaseConnection
from disaster_response.database.report_store import SqlReportStore
from disaster_response.visualization.map_generator import create_report_map


def main():
    if not settings.database_url:
        print("ERROR: DATABASE_URL not found in .env file")
        sys.exit(1)

    print("=" * 60)
    print("India Disaster Response - Generating Report Map")
    print("=" * 60)

    db = DatabaseConnection(settings.database_url)
    store = SqlReportStore(db)

    reports = store.list_active()
    stats = store.get_statistics()

    print(f"\nActive reports: {stats['total_active']}")
    for severity, count in sorted(stats["by_severity"].items()):
        print(f"  - {severity:<9} {count}")
    print(f"  - via SMS:  {stats['by_source'].get('sms', 0)}")
    print(f"  - via web:  {stats['by_source'].get('web', 0)}")

    print("\nGenerating interactive map...")

    report_map = create_report_map(
        reports,
        title=f"India Disaster Response - Active Reports ({datetime.now().strftime('%Y-%m-%d %H:%M')})",
    )

    output_path = os.path.join(os.path.dirname(__file__), "disaster_report_map.html")
    report_map.save(output_path)
    db.close()

    print(f"\nMap saved to: {output_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
