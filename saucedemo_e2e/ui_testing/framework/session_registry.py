"""
================================================================================
Session Registry
================================================================================

Per-execution-context ownership of live browser sessions.

Each concurrently running test (an xdist worker, a thread) gets exactly one
browser session, created lazily on first acquire and destroyed on release.
Playwright sync objects are bound to the thread that created them, so a
session must only be driven from the context that acquired it.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from loguru import logger
from playwright.sync_api import Browser, BrowserContext, Error as PlaywrightError, Page, Playwright

from .browser_manager import BrowserHandle, BrowserKind, BrowserProvisioner, ProvisioningError
from .config_loader import RunConfig


def current_context_id() -> str:
    """
    Identity of the calling execution context: xdist worker plus thread.

    Returns:
        e.g. "gw1:140234" under xdist, "main:140234" otherwise
    """
    worker = os.getenv("PYTEST_XDIST_WORKER", "main")
    return f"{worker}:{threading.get_ident()}"


@dataclass
class Session:
    """
    A live browser bound to one execution context.

    Page objects and ElementActions only borrow a Session; the registry that
    created it is the only one allowed to terminate it.
    """

    context_id: str
    kind: BrowserKind
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    timeout: float
    _closed: bool = field(default=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def terminate(self) -> None:
        """
        Close the browser context, the browser and the Playwright driver.

        Idempotent. Every step is attempted even if an earlier one fails;
        the first failure is re-raised after all steps ran.
        """
        if self._closed:
            return
        self._closed = True

        first_error: Optional[Exception] = None
        for step in (self.context.close, self.browser.close, self.playwright.stop):
            try:
                step()
            except Exception as e:
                logger.warning(f"[{self.context_id}] {self.kind.name} teardown step failed: {e}")
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class SessionRegistry:
    """
    Binds at most one Session to each execution context id.

    Lookups and binds for one context never observe another context's entry.
    A per-key lock is held while a session is created, so browsers for
    different contexts launch in parallel while a single context can never
    create two.

    Usage:
        registry = SessionRegistry(BrowserProvisioner(config), config)
        session = registry.acquire(current_context_id())
        try:
            ElementActions(session).click(Locator.id("login-button"))
        finally:
            registry.release(current_context_id())
    """

    def __init__(
        self,
        provisioner: Optional[BrowserProvisioner] = None,
        config: Optional[RunConfig] = None,
    ):
        """
        Initialize session registry.

        Args:
            provisioner: Launches raw browsers; built from config when omitted
            config: Run configuration (browser, timeout, viewport)
        """
        self.config = config or RunConfig()
        self.provisioner = provisioner or BrowserProvisioner(self.config)

        self._sessions: Dict[str, Session] = {}
        self._key_locks: Dict[str, _KeyLock] = {}
        self._table_lock = threading.Lock()

    @contextmanager
    def _locked(self, context_id: str) -> Iterator[None]:
        """Hold the lock for `context_id`; the lock is dropped once nobody uses it."""
        with self._table_lock:
            key_lock = self._key_locks.get(context_id)
            if key_lock is None:
                key_lock = self._key_locks[context_id] = _KeyLock()
            key_lock.users += 1

        try:
            with key_lock.lock:
                yield
        finally:
            with self._table_lock:
                key_lock.users -= 1
                if key_lock.users == 0:
                    del self._key_locks[context_id]

    def acquire(self, context_id: str) -> Session:
        """
        Return the session bound to `context_id`, creating it if absent.

        Args:
            context_id: Opaque execution context id

        Returns:
            The bound Session (same instance on repeated calls)

        Raises:
            ProvisioningError: Launch or post-launch setup failed; nothing is bound
        """
        with self._locked(context_id):
            with self._table_lock:
                session = self._sessions.get(context_id)
            if session is not None:
                return session

            kind = BrowserKind.from_name(self.config.browser)
            handle = self.provisioner.launch(kind)
            session = self._configure(context_id, handle)

            with self._table_lock:
                self._sessions[context_id] = session

        logger.info(f"[{context_id}] {kind.name} session initialized (timeout={session.timeout}s)")
        return session

    def _configure(self, context_id: str, handle: BrowserHandle) -> Session:
        """Open a maximized context and page and apply the implicit wait floor."""
        width, height = self.config.viewport
        timeout_ms = self.config.timeout * 1000

        try:
            context = handle.browser.new_context(
                viewport={"width": width, "height": height},
                ignore_https_errors=True,
            )
            context.set_default_timeout(timeout_ms)
            page = context.new_page()
        except PlaywrightError as e:
            try:
                handle.close()
            except Exception as close_error:
                logger.warning(f"[{context_id}] Cleanup after failed setup also failed: {close_error}")
            raise ProvisioningError(
                f"Failed to configure {handle.kind.name} session for {context_id}: {e}"
            ) from e

        return Session(
            context_id=context_id,
            kind=handle.kind,
            playwright=handle.playwright,
            browser=handle.browser,
            context=context,
            page=page,
            timeout=self.config.timeout,
        )

    def get(self, context_id: str) -> Optional[Session]:
        """Return the bound session without creating one."""
        with self._table_lock:
            return self._sessions.get(context_id)

    def release(self, context_id: str) -> None:
        """
        Unbind and terminate the session for `context_id`.

        A missing session is a silent no-op. Teardown failures are logged and
        never raised, so they cannot mask the failure of the scenario that
        ran before them.
        """
        with self._locked(context_id):
            with self._table_lock:
                session = self._sessions.pop(context_id, None)

            if session is None:
                return

            logger.info(f"[{context_id}] Quitting {session.kind.name} session.")
            try:
                session.terminate()
            except Exception as e:
                logger.opt(exception=e).warning(
                    f"[{context_id}] {session.kind.name} session teardown failed: {e}"
                )

    def release_all(self) -> None:
        """Release every bound session. Used as an end-of-run sweep."""
        for context_id in self.active_contexts():
            self.release(context_id)

    def active_contexts(self) -> List[str]:
        with self._table_lock:
            return list(self._sessions)

    def __contains__(self, context_id: object) -> bool:
        with self._table_lock:
            return context_id in self._sessions

    def __len__(self) -> int:
        with self._table_lock:
            return len(self._sessions)


__all__ = [
    "Session",
    "SessionRegistry",
    "current_context_id",
]
