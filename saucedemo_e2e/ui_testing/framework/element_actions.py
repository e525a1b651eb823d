# ================================================================================
# Element Actions Module
# ================================================================================
#
# Wait-then-act element interaction layer shared by every page object.
#
# Every interaction first waits, bounded by the session timeout, for its
# precondition (visible or clickable) and only then acts. A precondition that
# is not met in time surfaces as ElementNotFoundError; a failure of the action
# itself surfaces as InteractionError. Nothing is retried here.
#
# Key Features:
#   - Visible / clickable wait conditions over Playwright actionability checks
#   - Non-throwing lookup() result for presence checks
#   - Allure step per interaction, loguru logging with locator and browser
#   - Navigation and scroll pass-through commands
#
# ================================================================================

import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import allure
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator as ElementRef
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from e2e_tools.report_tools.allure_utils import attach_screenshot

from .session_registry import Session


DEFAULT_TIMEOUT_SECONDS = 10.0


class WaitCondition(Enum):
    """Precondition awaited before an interaction."""

    VISIBLE = "visible"
    CLICKABLE = "clickable"


@dataclass(frozen=True)
class Locator:
    """
    Element selector: a strategy plus a value.

    Strategies:
        css, xpath, id, name, text, test_id (the `data-test` attribute)

    Example:
        Locator.id("user-name")
        Locator.css(".inventory_item_name")
        Locator.test_id("error")
    """

    strategy: str
    value: str

    STRATEGIES = ("css", "xpath", "id", "name", "text", "test_id")

    def __post_init__(self):
        if self.strategy not in self.STRATEGIES:
            raise ValueError(
                f"Unknown locator strategy: {self.strategy!r} (expected one of {self.STRATEGIES})"
            )

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls("css", value)

    @classmethod
    def xpath(cls, value: str) -> "Locator":
        return cls("xpath", value)

    @classmethod
    def id(cls, value: str) -> "Locator":
        return cls("id", value)

    @classmethod
    def name(cls, value: str) -> "Locator":
        return cls("name", value)

    @classmethod
    def text(cls, value: str) -> "Locator":
        return cls("text", value)

    @classmethod
    def test_id(cls, value: str) -> "Locator":
        return cls("test_id", value)

    def to_selector(self) -> str:
        """Render as a Playwright selector string."""
        if self.strategy == "css":
            return f"css={self.value}"
        if self.strategy == "xpath":
            return f"xpath={self.value}"
        if self.strategy == "text":
            return f"text={self.value}"
        attribute = {"id": "id", "name": "name", "test_id": "data-test"}[self.strategy]
        return f'css=[{attribute}="{self.value}"]'

    def __str__(self) -> str:
        return f"{self.strategy}={self.value}"


class ElementNotFoundError(Exception):
    """Raised when a wait precondition is not met within the timeout."""

    def __init__(
        self,
        locator: Locator,
        condition: WaitCondition,
        timeout: float,
        browser: str,
    ):
        self.locator = locator
        self.condition = condition
        self.timeout = timeout
        self.browser = browser
        super().__init__(
            f"Element not {condition.value} after {timeout:g}s: {locator} [{browser}]"
        )


class InteractionError(Exception):
    """Raised when an action fails after its wait precondition was met."""

    def __init__(self, locator: Optional[Locator], action: str, browser: str, reason: str = ""):
        self.locator = locator
        self.action = action
        self.browser = browser
        target = f" on {locator}" if locator is not None else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to {action}{target} [{browser}]{detail}")


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one bounded wait: the element, or the timeout that prevented finding it."""

    locator: Locator
    condition: WaitCondition
    element: Optional[ElementRef] = None
    cause: Optional[PlaywrightTimeoutError] = None

    @property
    def found(self) -> bool:
        return self.element is not None


class ElementActions:
    """
    Wait-then-act interactions against the page of a borrowed Session.

    Example:
        actions = ElementActions(session)
        actions.set_text(Locator.id("user-name"), "standard_user")
        actions.click(Locator.id("login-button"))
        assert actions.get_text(Locator.css(".title")) == "Products"
    """

    def __init__(self, session: Session, timeout: Optional[float] = None):
        """
        Args:
            session: Active browser session (never terminated from here)
            timeout: Wait bound in seconds; defaults to the session timeout
        """
        self.session = session
        self.timeout = timeout if timeout is not None else (session.timeout or DEFAULT_TIMEOUT_SECONDS)
        self.clock = time.monotonic

    @property
    def page(self):
        return self.session.page

    @property
    def browser_name(self) -> str:
        return self.session.kind.name

    @property
    def current_url(self) -> str:
        return self.page.url

    def _timeout_ms(self) -> int:
        # Playwright treats 0 as "wait forever"
        return max(int(self.timeout * 1000), 1)

    def _remaining_ms(self, deadline: float) -> int:
        return max(int((deadline - self.clock()) * 1000), 1)

    # =========================================================================
    # Waiting
    # =========================================================================

    def lookup(self, locator: Locator, condition: WaitCondition = WaitCondition.VISIBLE) -> LookupResult:
        """
        Wait for `locator` to satisfy `condition` without raising on timeout.

        Clickable means visible, stable, enabled and not obscured, checked by a
        Playwright trial click that performs no click.

        Raises:
            InteractionError: The lookup itself is invalid (e.g. malformed selector)
        """
        element = self.page.locator(locator.to_selector()).first
        logger.debug(f"Waiting for {locator} to be {condition.value} (timeout={self.timeout:g}s)")

        try:
            if condition is WaitCondition.CLICKABLE:
                element.click(trial=True, timeout=self._timeout_ms())
            else:
                element.wait_for(state="visible", timeout=self._timeout_ms())
        except PlaywrightTimeoutError as e:
            return LookupResult(locator, condition, cause=e)
        except PlaywrightError as e:
            raise InteractionError(locator, f"wait for {condition.value}", self.browser_name, str(e)) from e

        return LookupResult(locator, condition, element=element)

    def _require(self, locator: Locator, condition: WaitCondition) -> ElementRef:
        result = self.lookup(locator, condition)
        if not result.found:
            logger.error(
                f"Element not {condition.value} after {self.timeout:g} seconds: "
                f"{locator} [{self.browser_name}]"
            )
            raise ElementNotFoundError(locator, condition, self.timeout, self.browser_name) from result.cause
        return result.element

    @allure.step("Wait for element: {locator}")
    def wait_and_get(self, locator: Locator) -> ElementRef:
        """
        Wait until an element matching `locator` is present and visible.

        Raises:
            ElementNotFoundError: Not visible within the timeout
        """
        return self._require(locator, WaitCondition.VISIBLE)

    # =========================================================================
    # Interactions
    # =========================================================================

    @allure.step("Click element: {locator}")
    def click(self, locator: Locator) -> None:
        """
        Wait until the element is clickable, then click it.

        The click dispatch only gets what is left of the same timeout.

        Raises:
            ElementNotFoundError: Not clickable within the timeout
            InteractionError: The click dispatch failed
        """
        deadline = self.clock() + self.timeout
        element = self._require(locator, WaitCondition.CLICKABLE)

        try:
            element.click(timeout=self._remaining_ms(deadline))
        except PlaywrightError as e:
            logger.error(f"Failed to click element: {locator} [{self.browser_name}]: {e}")
            raise InteractionError(locator, "click", self.browser_name, str(e)) from e

        logger.info(f"Clicked element: {locator}")

    @allure.step("Set text on element: {locator}")
    def set_text(self, locator: Locator, value: str) -> None:
        """
        Replace the content of an input: clear first, then type `value`.

        Raises:
            ElementNotFoundError: Not visible within the timeout
            InteractionError: Clearing or typing failed
        """
        element = self.wait_and_get(locator)
        logger.info(f"Setting text '{value}' to element: {locator}")

        try:
            element.clear()
            element.fill(value)
        except PlaywrightError as e:
            logger.error(f"Failed to send text '{value}' to element: {locator}: {e}")
            raise InteractionError(locator, "set text", self.browser_name, str(e)) from e

    @allure.step("Get text: {locator}")
    def get_text(self, locator: Locator) -> str:
        """Return the rendered text of a visible element."""
        element = self.wait_and_get(locator)

        try:
            text = element.inner_text()
        except PlaywrightError as e:
            raise InteractionError(locator, "read text", self.browser_name, str(e)) from e

        logger.info(f"Extracted text '{text}' from element: {locator}")
        return text

    @allure.step("Get all texts: {locator}")
    def get_texts(self, locator: Locator) -> List[str]:
        """
        Rendered text of every element matching `locator`, once the first is visible.

        An empty list means no match became visible within the timeout.
        """
        if not self.lookup(locator, WaitCondition.VISIBLE).found:
            return []

        try:
            texts = self.page.locator(locator.to_selector()).all_inner_texts()
        except PlaywrightError as e:
            raise InteractionError(locator, "read texts", self.browser_name, str(e)) from e

        logger.info(f"Extracted {len(texts)} texts from elements: {locator}")
        return texts

    @allure.step("Check element displayed: {locator}")
    def is_displayed(self, locator: Locator) -> bool:
        """
        Presence check for assertions: True if the element becomes visible
        within the timeout, False otherwise. Absence is never an error here.
        """
        result = self.lookup(locator, WaitCondition.VISIBLE)
        if not result.found:
            logger.warning(f"Element not displayed or not found: {locator}")
            return False

        try:
            visible = result.element.is_visible()
        except PlaywrightError as e:
            logger.warning(f"Element detached while checking visibility: {locator}: {e}")
            return False

        logger.info(f"Element is displayed: {locator}")
        return visible

    @allure.step("Upload file: {path}")
    def upload_file(self, locator: Locator, path: str) -> None:
        """
        Write a file path into a visible file input.

        Raises:
            ElementNotFoundError: Not visible within the timeout
            InteractionError: The input rejected the file
        """
        logger.info(f"Uploading file: {path}")
        element = self.wait_and_get(locator)

        try:
            element.set_input_files(path)
        except PlaywrightError as e:
            logger.error(f"File upload failed: {path}: {e}")
            raise InteractionError(locator, "upload file", self.browser_name, str(e)) from e

    # =========================================================================
    # Pass-through commands (no wait precondition)
    # =========================================================================

    @allure.step("Scroll to element")
    def scroll_to(self, element: ElementRef) -> None:
        logger.info(f"Scrolling to element: {element}")
        element.evaluate("el => el.scrollIntoView(true)")

    @allure.step("Open {url}")
    def open(self, url: str) -> None:
        logger.info(f"Navigating to: {url}")
        self.page.goto(url)

    @allure.step("Navigate back")
    def navigate_back(self) -> None:
        logger.info("Navigating back to the previous page.")
        self.page.go_back()

    @allure.step("Navigate forward")
    def navigate_forward(self) -> None:
        logger.info("Navigating forward to the next page.")
        self.page.go_forward()

    @allure.step("Refresh page")
    def refresh(self) -> None:
        logger.info("Refreshing the current page.")
        self.page.reload()

    def take_screenshot(self, name: str, full_page: bool = False) -> bytes:
        """Capture the page and attach it to the Allure report."""
        screenshot = self.page.screenshot(full_page=full_page)
        attach_screenshot(screenshot, name=name)
        return screenshot


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "ElementActions",
    "ElementNotFoundError",
    "ElementRef",
    "InteractionError",
    "Locator",
    "LookupResult",
    "WaitCondition",
]
