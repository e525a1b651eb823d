"""
In-memory Playwright doubles for framework unit tests.

Waiting is simulated on a FakeClock: a wait that succeeds advances the clock
by the time the element needed to become ready, a wait that times out
advances it by the full timeout. No real time passes and no browser starts.
"""

import threading
import time
from typing import Callable, Dict, List, Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from saucedemo_e2e.ui_testing.framework.browser_manager import BrowserHandle, BrowserKind


class FakeClock:
    def __init__(self):
        self.now = 0

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeElement:
    """
    Stand-in for a Playwright Locator.

    Args:
        visible_after: ms until the element renders visibly, None for never
        clickable_after: ms until it is actionable, None for never;
            defaults to visible_after
        dispatch_after: ms the real click waits for actionability again,
            None for never (e.g. re-rendered after the trial click)
    """

    def __init__(
        self,
        clock: FakeClock,
        visible_after: Optional[int] = 0,
        clickable_after: Optional[int] = -1,
        text: str = "",
        value: str = "",
        on_click: Optional[Callable[[], None]] = None,
        click_error: Optional[Exception] = None,
        texts: Optional[List[str]] = None,
        dispatch_after: Optional[int] = 0,
    ):
        self.clock = clock
        self.visible_after = visible_after
        self.clickable_after = visible_after if clickable_after == -1 else clickable_after
        self.text = text
        self.value = value
        self.on_click = on_click
        self.click_error = click_error
        self.texts = texts if texts is not None else [text]
        self.dispatch_after = dispatch_after
        self.click_timeout: Optional[int] = None
        self.calls: List[str] = []
        self.files = None

    @property
    def first(self) -> "FakeElement":
        return self

    def _wait(self, ready_after: Optional[int], timeout: int, what: str) -> None:
        if ready_after is not None and ready_after <= timeout:
            self.clock.advance(ready_after)
            return
        self.clock.advance(timeout)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {what}.")

    def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        self.calls.append(f"wait_for:{state}")
        self._wait(self.visible_after, timeout, state)

    def click(self, trial: bool = False, timeout: Optional[int] = None) -> None:
        if trial:
            self.calls.append("trial_click")
            self._wait(self.clickable_after, timeout, "actionability")
            return
        self.calls.append("click")
        self.click_timeout = timeout
        self._wait(self.dispatch_after, timeout, "click")
        if self.click_error is not None:
            raise self.click_error
        if self.on_click is not None:
            self.on_click()

    def clear(self) -> None:
        self.calls.append("clear")
        self.value = ""

    def fill(self, value: str) -> None:
        self.calls.append("fill")
        self.value = value

    def inner_text(self) -> str:
        return self.text

    def all_inner_texts(self) -> List[str]:
        return list(self.texts)

    def is_visible(self) -> bool:
        return self.visible_after is not None

    def set_input_files(self, files) -> None:
        self.calls.append("set_input_files")
        self.files = files

    def evaluate(self, expression: str):
        self.calls.append(f"evaluate:{expression}")


class FakePage:
    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.elements: Dict[str, FakeElement] = {}
        self.url = "about:blank"
        self.history: List[str] = []
        self.closed = False

    def add(self, selector: str, **kwargs) -> FakeElement:
        element = FakeElement(self.clock, **kwargs)
        self.elements[selector] = element
        return element

    def locator(self, selector: str) -> FakeElement:
        if selector not in self.elements:
            return FakeElement(self.clock, visible_after=None, texts=[])
        return self.elements[selector]

    def goto(self, url: str) -> None:
        self.history.append(f"goto:{url}")
        self.url = url

    def go_back(self) -> None:
        self.history.append("back")

    def go_forward(self) -> None:
        self.history.append("forward")

    def reload(self) -> None:
        self.history.append("reload")

    def screenshot(self, full_page: bool = False) -> bytes:
        return b"\x89PNG fake"


class FakeBrowserContext:
    def __init__(self, page_factory: Callable[[], FakePage], **options):
        self.options = options
        self.page_factory = page_factory
        self.default_timeout = None
        self.closed = False
        self.close_error: Optional[Exception] = None

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def new_page(self) -> FakePage:
        return self.page_factory()

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeBrowser:
    def __init__(self, page_factory: Callable[[], FakePage], context_error: Optional[Exception] = None):
        self.page_factory = page_factory
        self.context_error = context_error
        self.contexts: List[FakeBrowserContext] = []
        self.closed = False

    def new_context(self, **options) -> FakeBrowserContext:
        if self.context_error is not None:
            raise self.context_error
        context = FakeBrowserContext(self.page_factory, **options)
        self.contexts.append(context)
        return context

    def close(self) -> None:
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeProvisioner:
    """Records launches and hands out FakeBrowser handles."""

    def __init__(
        self,
        page_factory: Optional[Callable[[], FakePage]] = None,
        launch_error: Optional[Exception] = None,
        context_error: Optional[Exception] = None,
        launch_delay: float = 0.0,
    ):
        self.page_factory = page_factory or FakePage
        self.launch_error = launch_error
        self.context_error = context_error
        self.launch_delay = launch_delay
        self.launched: List[BrowserHandle] = []
        self._lock = threading.Lock()

    def launch(self, kind: BrowserKind) -> BrowserHandle:
        if self.launch_delay:
            time.sleep(self.launch_delay)
        if self.launch_error is not None:
            raise self.launch_error
        handle = BrowserHandle(
            kind=kind,
            playwright=FakePlaywright(),
            browser=FakeBrowser(self.page_factory, self.context_error),
        )
        with self._lock:
            self.launched.append(handle)
        return handle
