"""
================================================================================
Allure Report Utilities
================================================================================

Attachment helpers used by the UI framework on failure, and report
generation used by `run_tests.py`.

Features:
- Screenshot / session metadata attachments
- Result summary parsing from allure-results
- HTML report generation with history carry-over

================================================================================
"""

import json
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    allure.attach(
        json.dumps(data, indent=2, default=str),
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_screenshot(png: bytes, name: str = "Screenshot"):
    """
    Attach a PNG screenshot to Allure report.

    Args:
        png: Raw PNG bytes as returned by `page.screenshot()`
        name: Attachment name
    """
    allure.attach(
        png,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_session_info(
    context_id: str,
    browser: str,
    url: Optional[str] = None,
    timeout: Optional[float] = None
):
    """
    Attach the browser session identity so a failure can be traced to its worker.

    Args:
        context_id: Execution context the session was bound to
        browser: Browser kind name
        url: Page URL at the time of attachment
        timeout: Configured wait timeout in seconds
    """
    attach_json(
        {
            "context_id": context_id,
            "browser": browser,
            "url": url,
            "timeout_seconds": timeout,
        },
        name="Browser Session",
    )


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class TestResultSummary:
    """Summary of test execution results."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100


class AllureReportProcessor:
    """
    Summarizes allure-results and renders the HTML report.

    Args:
        results_dir: Allure results directory
        report_dir: Output report directory
    """

    def __init__(self, results_dir: Path, report_dir: Optional[Path] = None):
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")

    def parse_results(self) -> List[Dict[str, Any]]:
        results = []

        for result_file in self.results_dir.glob("*-result.json"):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> TestResultSummary:
        summary = TestResultSummary()

        for result in self.parse_results():
            summary.total += 1
            status = result.get("status", "unknown")
            if status in ("passed", "failed", "broken", "skipped"):
                setattr(summary, status, getattr(summary, status) + 1)
            else:
                summary.unknown += 1
            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)

        return summary

    def copy_history(self) -> None:
        """Copy trend history from the previous report into the new results."""
        history_source = self.report_dir / "history"
        history_dest = self.results_dir / "history"

        if history_source.exists():
            if history_dest.exists():
                shutil.rmtree(history_dest)
            shutil.copytree(history_source, history_dest)
            logger.info("Copied history from previous report")

    def generate_report(self) -> bool:
        """
        Generate Allure HTML report.

        Returns:
            True if successful
        """
        self.copy_history()
        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.warning("Allure CLI not found. Please install Allure to generate reports.")
            return False

        if result.returncode != 0:
            logger.error(f"Report generation failed: {result.stderr}")
            return False

        logger.info(f"Report generated at {self.report_dir}")
        return True

    def log_summary(self) -> TestResultSummary:
        summary = self.generate_summary()
        logger.info("=" * 60)
        logger.info(
            f"Total: {summary.total} | Passed: {summary.passed} | "
            f"Failed: {summary.failed} | Broken: {summary.broken} | "
            f"Skipped: {summary.skipped}"
        )
        logger.info(f"Pass Rate: {summary.pass_rate:.2f}% | Duration: {summary.duration_ms / 1000:.2f}s")
        logger.info("=" * 60)
        return summary


__all__ = [
    "attach_json",
    "attach_screenshot",
    "attach_session_info",
    "TestResultSummary",
    "AllureReportProcessor",
]
