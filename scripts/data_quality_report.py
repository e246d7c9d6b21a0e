#!/usr/bin/env python3
"""
data_quality_report.py
----------------------

Maintenance script that validates every tool in the catalog and reports
missing fields, out-of-range values and placeholder (mock) data.
Run it periodically (e.g., daily via cron) or before a release.

Usage:
    python scripts/data_quality_report.py [--fix] [--published-only]

Options:
    --fix              Archive tools detected as mock data
    --published-only   Only check tools visible to the public
"""

import sys
import os
import argparse
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.config import ProductionConfig
from app.models.catalog import Tool
from app.models.db import db
from app.services.revalidation import mark_stale
from app.services.tool_validation import summarize_catalog
from app.logger import logger


class DataQualityReporter:
    """Runs tool validation over the catalog and optionally archives mock data."""

    def __init__(self, fix=False, published_only=False):
        self.fix = fix
        self.published_only = published_only
        self.summary = None
        self.archived = 0

    def check_tools(self):
        query = Tool.published() if self.published_only else Tool.query
        self.summary = summarize_catalog(query.all())
        for report in self.summary["reports"]:
            for error in report["errors"]:
                logger.warning("Tool error.", tool=report["name"], error=error)
            for warning in report["warnings"]:
                logger.info("Tool warning.", tool=report["name"], warning=warning)

    def archive_mock_data(self):
        """Archive every reported tool flagged as mock data."""
        mock_ids = [
            report["id"] for report in self.summary["reports"] if report["is_mock_data"]
        ]
        for tool_id in mock_ids:
            tool = Tool.get_by_id(tool_id)
            if tool is None or tool.status == "archived":
                continue
            tool.status = "archived"
            self.archived += 1
            logger.info("Archived mock data tool.", tool_id=tool.id, name=tool.name)
        if self.archived:
            mark_stale("tools", updated_by="data_quality_report", commit=False)
        db.session.commit()

    def generate_report(self):
        """Log the summary."""
        logger.info(
            "Data quality report.",
            generated_at=datetime.now(timezone.utc).isoformat(),
            tools_checked=self.summary["tools_checked"],
            invalid_tools=self.summary["invalid_tools"],
            warnings=self.summary["warnings"],
            mock_data_tools=self.summary["mock_data_tools"],
            archived=self.archived,
        )
        if not self.fix:
            logger.info("REPORT ONLY - Use --fix to archive mock data tools")

    def run(self):
        logger.info(
            "Starting data quality check.",
            fix=self.fix,
            published_only=self.published_only,
        )
        self.check_tools()
        if self.fix:
            self.archive_mock_data()
        self.generate_report()
        return self.summary


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate catalog tools and report data quality issues"
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Archive tools detected as mock data",
    )
    parser.add_argument(
        "--published-only",
        action="store_true",
        help="Only check published tools",
    )
    args = parser.parse_args()

    app = create_app(ProductionConfig)

    with app.app_context():
        reporter = DataQualityReporter(
            fix=args.fix, published_only=args.published_only
        )
        summary = reporter.run()

        # Exit with error code if invalid tools were found
        if summary["invalid_tools"] > 0:
            sys.exit(1)

        sys.exit(0)


if __name__ == "__main__":
    main()
