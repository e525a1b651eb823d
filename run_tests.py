#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Entry point for executing the Sauce Demo suites.
#
# Features:
#   - Run framework unit tests and/or browser scenarios
#   - Browser selection passed through UI_BROWSER
#   - Parallel execution contexts via pytest-xdist
#   - Allure report generation and summary
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browser firefox --tags smoke
#   python run_tests.py --suite all --parallel 4 --headed
#
# ================================================================================

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from e2e_tools.common import init_logger
from e2e_tools.report_tools.allure_utils import AllureReportProcessor


class TestRunner:
    """
    Orchestrates one pytest run.

    This class handles:
    - Test suite selection
    - Browser / headless settings for the UI layer
    - Parallel execution configuration
    - Report generation
    """
    __test__ = False

    SUITE_PATHS: Dict[str, List[str]] = {
        "unit": ["saucedemo_e2e/unit"],
        "ui": ["saucedemo_e2e/ui_testing/tests"],
        "all": ["saucedemo_e2e"],
    }

    def __init__(
        self,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        parallel: int = 1,
        browser: str = "chrome",
        headless: bool = True,
        allure_report: bool = True,
        verbose: bool = False
    ):
        """
        Initialize test runner.

        Args:
            suite: Test suite to run - "unit", "ui", "all"
            tags: List of pytest markers to filter tests
            parallel: Number of parallel workers
            browser: Browser for UI tests - "chrome", "firefox", "edge", "safari"
            headless: Run browser in headless mode
            allure_report: Generate Allure report
            verbose: Enable verbose output
        """
        self.suite = suite
        self.tags = tags or []
        self.parallel = parallel
        self.browser = browser
        self.headless = headless
        self.allure_report = allure_report
        self.verbose = verbose

        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / "reports"
        self.allure_results = self.reports_dir / "allure-results"
        self.allure_report_dir = self.reports_dir / "allure-report"

    @property
    def runs_browser(self) -> bool:
        return self.suite in ("ui", "all")

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        logger.info(f"Parallel Workers: {self.parallel}")
        if self.runs_browser:
            logger.info(f"Browser: {self.browser}")
            logger.info(f"Headless: {self.headless}")
        logger.info("=" * 60)

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        self.allure_results.mkdir(parents=True, exist_ok=True)

        cmd = self.build_pytest_command()
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, cwd=str(self.root_dir), env=self.build_env())
            exit_code = result.returncode
        except OSError as e:
            logger.error(f"Test execution failed: {e}")
            exit_code = 1

        if self.allure_report:
            processor = AllureReportProcessor(self.allure_results, self.allure_report_dir)
            processor.log_summary()
            processor.generate_report()

        self._print_summary(exit_code)
        return exit_code

    def build_env(self) -> Dict[str, str]:
        """Environment for the pytest process; overrides config.yaml ui.* keys."""
        env = dict(os.environ)
        env["UI_BROWSER"] = self.browser
        env["UI_HEADLESS"] = "true" if self.headless else "false"
        return env

    def build_pytest_command(self) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest", *self.SUITE_PATHS[self.suite]]

        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])

        if self.parallel > 1:
            cmd.extend(["-n", str(self.parallel)])

        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        if self.runs_browser:
            cmd.append("--run-e2e")

        cmd.append("-v" if self.verbose else "-q")
        return cmd

    def _print_summary(self, exit_code: int) -> None:
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"TEST EXECUTION FAILED (exit code: {exit_code})")

        if self.allure_report:
            logger.info(f"Report available at: {self.allure_report_dir}")

        logger.info("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sauce Demo Automation Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Framework unit tests only (no browser)
  python run_tests.py --suite unit --no-allure

  # P0 smoke scenarios on 4 workers
  python run_tests.py --suite ui --tags P0 smoke --parallel 4

  # UI scenarios with a visible Firefox window
  python run_tests.py --suite ui --headed --browser firefox
        """
    )

    parser.add_argument(
        "--suite",
        choices=["unit", "ui", "all"],
        default="all",
        help="Test suite to run (default: all)"
    )
    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke)"
    )
    parser.add_argument(
        "--parallel", "-n",
        type=int,
        default=1,
        help="Number of parallel workers (default: 1)"
    )
    parser.add_argument(
        "--browser",
        default="chrome",
        help="Browser for UI tests: chrome, firefox, edge, safari (default: chrome)"
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )
    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Disable Allure report generation"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )
    return parser


def main():
    """Main entry point."""
    init_logger()
    args = build_parser().parse_args()

    runner = TestRunner(
        suite=args.suite,
        tags=args.tags,
        parallel=args.parallel,
        browser=args.browser,
        headless=not args.headed,
        allure_report=not args.no_allure,
        verbose=args.verbose
    )

    sys.exit(runner.run())


if __name__ == "__main__":
    main()
