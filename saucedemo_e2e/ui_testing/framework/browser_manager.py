"""
================================================================================
Browser Manager
================================================================================

Browser provisioning for UI automation.

Features:
    - Browser kind resolution with Chrome fallback
    - Platform guard for Safari (WebKit) on non-macOS hosts
    - Optional Playwright browser runtime installation
    - Uniform ProvisioningError for every launch failure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import platform
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from playwright.sync_api import Browser, Error as PlaywrightError, Playwright, sync_playwright

from .config_loader import RunConfig


class ProvisioningError(Exception):
    """Raised when a browser cannot be launched or configured."""
    pass


class PlatformUnsupportedError(ProvisioningError):
    """Raised when a browser kind cannot run on the current host OS."""
    pass


class BrowserKind(Enum):
    """Supported browser engines."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "BrowserKind":
        """
        Resolve free-text configuration into a BrowserKind.

        Blank or missing input resolves to CHROME. Unrecognized input resolves
        to CHROME with a warning.

        Args:
            name: Browser name, case-insensitive (e.g. "firefox", "EDGE")
        """
        if name is None or not str(name).strip():
            return cls.CHROME

        try:
            return cls(str(name).strip().lower())
        except ValueError:
            logger.warning(f"Unsupported browser: {name!r}. Falling back to {cls.CHROME.name}.")
            return cls.CHROME

    @property
    def engine(self) -> str:
        """Playwright browser type used to launch this kind."""
        return _ENGINES[self]


_ENGINES: Dict[BrowserKind, str] = {
    BrowserKind.CHROME: "chromium",
    BrowserKind.FIREFOX: "firefox",
    BrowserKind.EDGE: "chromium",
    BrowserKind.SAFARI: "webkit",
}

# Installable runtime names for `playwright install`
_INSTALL_TARGETS: Dict[BrowserKind, str] = {
    BrowserKind.CHROME: "chromium",
    BrowserKind.FIREFOX: "firefox",
    BrowserKind.EDGE: "msedge",
    BrowserKind.SAFARI: "webkit",
}


@dataclass
class BrowserHandle:
    """A freshly launched browser together with the Playwright driver that owns it."""

    kind: BrowserKind
    playwright: Playwright
    browser: Browser

    def close(self) -> None:
        """Close the browser and stop its driver process."""
        try:
            self.browser.close()
        finally:
            self.playwright.stop()


class BrowserProvisioner:
    """
    Launches configured browser instances.

    The provisioner never retries: a failed launch surfaces immediately as
    ProvisioningError and retry policy belongs to the caller.

    Usage:
        provisioner = BrowserProvisioner(run_config)
        handle = provisioner.launch(BrowserKind.FIREFOX)
        page = handle.browser.new_page()
        ...
        handle.close()
    """

    # Launch arguments per browser kind
    DEFAULT_LAUNCH_ARGS: Dict[BrowserKind, List[str]] = {
        BrowserKind.CHROME: [
            "--remote-allow-origins=*",
            "--ignore-certificate-errors",
        ],
        BrowserKind.EDGE: [
            "--ignore-certificate-errors",
        ],
    }

    def __init__(self, config: Optional[RunConfig] = None):
        """
        Initialize browser provisioner.

        Args:
            config: Run configuration; defaults are used when omitted
        """
        self.config = config or RunConfig()

    def launch(self, kind: Union[BrowserKind, str, None]) -> BrowserHandle:
        """
        Launch a new browser of the requested kind.

        Args:
            kind: BrowserKind, or free text resolved via BrowserKind.from_name

        Returns:
            BrowserHandle owning the new browser

        Raises:
            PlatformUnsupportedError: Safari requested on a non-macOS host
            ProvisioningError: Runtime installation or launch failed
        """
        if not isinstance(kind, BrowserKind):
            kind = BrowserKind.from_name(kind)

        self._check_platform(kind)

        if self.config.install_browsers:
            self._ensure_runtime(kind)

        launch_options = self._launch_options(kind)

        try:
            pw = sync_playwright().start()
        except PlaywrightError as e:
            raise ProvisioningError(f"Failed to start Playwright driver for {kind.name}: {e}") from e

        try:
            browser = getattr(pw, kind.engine).launch(**launch_options)
        except PlaywrightError as e:
            pw.stop()
            raise ProvisioningError(f"Failed to launch {kind.name} browser: {e}") from e

        logger.debug(
            f"Browser started: {kind.name} via {kind.engine} "
            f"(headless={launch_options['headless']})"
        )
        return BrowserHandle(kind=kind, playwright=pw, browser=browser)

    def _launch_options(self, kind: BrowserKind) -> Dict[str, Any]:
        options: Dict[str, Any] = {"headless": self.config.headless}

        args = self.DEFAULT_LAUNCH_ARGS.get(kind)
        if args:
            options["args"] = list(args)

        if kind is BrowserKind.EDGE:
            options["channel"] = "msedge"
        elif kind is BrowserKind.CHROME and self.config.channel:
            options["channel"] = self.config.channel

        return options

    @staticmethod
    def _check_platform(kind: BrowserKind) -> None:
        if kind is BrowserKind.SAFARI and platform.system() != "Darwin":
            raise PlatformUnsupportedError(
                f"{kind.name} is only supported on macOS (host: {platform.system()})"
            )

    @staticmethod
    def _ensure_runtime(kind: BrowserKind) -> None:
        """Install the Playwright browser runtime for `kind` if it is missing."""
        target = _INSTALL_TARGETS[kind]
        cmd = [sys.executable, "-m", "playwright", "install", target]
        logger.info(f"Ensuring browser runtime: {' '.join(cmd[2:])}")

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise ProvisioningError(f"Playwright CLI unavailable for {kind.name}: {e}") from e
        except subprocess.CalledProcessError as e:
            raise ProvisioningError(
                f"Failed to install {target} runtime for {kind.name}: {e.stderr or e}"
            ) from e


__all__ = [
    "BrowserHandle",
    "BrowserKind",
    "BrowserProvisioner",
    "PlatformUnsupportedError",
    "ProvisioningError",
]
