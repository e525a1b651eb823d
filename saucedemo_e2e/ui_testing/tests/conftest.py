"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures binding browser sessions to scenarios.

Key Features:
- One immutable RunConfig per worker
- One SessionRegistry per worker, swept at session end
- Session acquired before the test body and released after it, even on failure
- Page Object fixtures
- Screenshot capture on failure

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger

from e2e_tools.common import init_logger
from e2e_tools.report_tools.allure_utils import attach_session_info
from saucedemo_e2e.ui_testing.framework.config_loader import ConfigLoader, RunConfig
from saucedemo_e2e.ui_testing.framework.browser_manager import BrowserProvisioner
from saucedemo_e2e.ui_testing.framework.element_actions import ElementActions
from saucedemo_e2e.ui_testing.framework.session_registry import (
    Session,
    SessionRegistry,
    current_context_id,
)
from saucedemo_e2e.ui_testing.pages import CartPage, LoginPage, ProductsPage


# ================================================================================
# Configuration Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def run_config() -> RunConfig:
    """Configuration snapshot loaded once per worker process."""
    config = ConfigLoader().run_config()
    init_logger(level=config.log_level, log_file=config.log_file)
    return config


@pytest.fixture(scope="session")
def credentials(run_config: RunConfig):
    return run_config.credentials


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def session_registry(run_config: RunConfig) -> Generator[SessionRegistry, None, None]:
    """
    Worker-wide registry of browser sessions.

    Sessions left bound by an interrupted test are released at session end.
    """
    registry = SessionRegistry(BrowserProvisioner(run_config), run_config)
    yield registry
    if len(registry):
        logger.warning(f"Releasing {len(registry)} leaked browser session(s)")
    registry.release_all()


@pytest.fixture(scope="function")
def browser_session(session_registry: SessionRegistry) -> Generator[Session, None, None]:
    """
    Browser session for the current execution context.

    Acquired before the first step, released after the last one whatever the
    outcome of the test.
    """
    context_id = current_context_id()
    session = session_registry.acquire(context_id)
    try:
        yield session
    finally:
        session_registry.release(context_id)


@pytest.fixture
def actions(browser_session: Session) -> ElementActions:
    return ElementActions(browser_session)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(actions: ElementActions, run_config: RunConfig) -> LoginPage:
    return LoginPage(actions, run_config.base_url)


@pytest.fixture
def products_page(actions: ElementActions) -> ProductsPage:
    return ProductsPage(actions)


@pytest.fixture
def cart_page(actions: ElementActions) -> CartPage:
    return CartPage(actions)


@pytest.fixture
def logged_in_products(login_page: LoginPage, products_page: ProductsPage, credentials) -> ProductsPage:
    """Products page reached through a standard-user login."""
    login_page.open()
    login_page.login(credentials["username"], credentials["password"])
    return products_page


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Attach a screenshot and the session identity to the Allure report when a
    UI test fails. Runs before fixture teardown, so the browser is still open.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    session = getattr(item, "funcargs", {}).get("browser_session")
    if session is None or session.closed:
        return

    try:
        ElementActions(session).take_screenshot("failure_screenshot", full_page=True)
        attach_session_info(
            session.context_id,
            session.kind.name,
            url=session.page.url,
            timeout=session.timeout,
        )
    except Exception as e:
        logger.warning(f"Failed to capture screenshot on failure: {e}")
