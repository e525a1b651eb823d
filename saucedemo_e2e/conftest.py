"""
================================================================================
Root Pytest Configuration
================================================================================

Registers project-wide markers, auto-marks tests by directory and keeps
browser scenarios out of the default run.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "e2e: Real-browser scenarios, run only with --run-e2e"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI scenario tests"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests using in-memory browser doubles"
    )


def pytest_collection_modifyitems(config, items):
    """
    Auto-mark tests by directory and skip e2e scenarios unless requested.
    """
    run_e2e = config.getoption("--run-e2e", default=False)
    skip_e2e = pytest.mark.skip(reason="browser scenario: pass --run-e2e to run")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Sauce Demo Browser E2E Framework",
        "=" * 60,
        "",
    ]
