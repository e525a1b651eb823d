"""
================================================================================
E2E Tools
================================================================================

Support utilities shared by the Sauce Demo UI test suites.

Modules:
    - common: Loguru logging setup
    - report_tools: Allure attachment helpers and report generation

Example:
    from e2e_tools.common import init_logger
    from e2e_tools.report_tools.allure_utils import attach_screenshot

    init_logger(level="DEBUG")
    attach_screenshot(page.screenshot(), name="checkout")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
