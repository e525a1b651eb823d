"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation core for the Sauce Demo suites.

Components:
    - config_loader: YAML + environment run configuration
    - browser_manager: Browser kind resolution and browser provisioning
    - session_registry: One browser session per execution context
    - element_actions: Wait-then-act element interactions

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError, RunConfig
from .browser_manager import (
    BrowserHandle,
    BrowserKind,
    BrowserProvisioner,
    PlatformUnsupportedError,
    ProvisioningError,
)
from .session_registry import Session, SessionRegistry, current_context_id
from .element_actions import (
    ElementActions,
    ElementNotFoundError,
    InteractionError,
    Locator,
    LookupResult,
    WaitCondition,
)

__all__ = [
    "BrowserHandle",
    "BrowserKind",
    "BrowserProvisioner",
    "ConfigLoader",
    "ConfigurationError",
    "ElementActions",
    "ElementNotFoundError",
    "InteractionError",
    "Locator",
    "LookupResult",
    "PlatformUnsupportedError",
    "ProvisioningError",
    "RunConfig",
    "Session",
    "SessionRegistry",
    "WaitCondition",
    "current_context_id",
]
