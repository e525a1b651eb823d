"""
================================================================================
Configuration Loader
================================================================================

YAML-based run configuration with environment variable override support.

Features:
    - config.yaml for browser / application settings
    - credentials.yaml kept apart from run settings
    - Environment variable override (UI_BROWSER overrides ui.browser)
    - Immutable RunConfig snapshot handed to the browser layer

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from loguru import logger


CONFIG_DIR = Path(__file__).parent.parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"
DEFAULT_CREDENTIALS_PATH = CONFIG_DIR / "credentials.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


@dataclass(frozen=True)
class RunConfig:
    """
    Read-only settings shared by every execution context of a test run.

    Attributes:
        browser: Free-text browser name, resolved later through BrowserKind
        base_url: Application under test
        headless: Launch browsers without a visible window
        timeout: Bounded wait for every element interaction, in seconds
        viewport: (width, height) of each new browser context
        channel: Optional Playwright channel for Chrome ("chrome", "chrome-beta")
        install_browsers: Run `playwright install` before launching
        credentials: Read-only credential pairs consumed by scenarios
    """
    browser: Optional[str] = "chrome"
    base_url: str = "https://www.saucedemo.com"
    headless: bool = True
    timeout: float = 10.0
    viewport: Tuple[int, int] = (1920, 1080)
    channel: Optional[str] = None
    install_browsers: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
    credentials: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def credential(self, key: str) -> str:
        """Return a credential value, failing loudly when it is missing."""
        try:
            return self.credentials[key]
        except KeyError:
            raise ConfigurationError(f"Credential '{key}' is not configured") from None


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BROWSER)
        2. YAML configuration files
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.browser", "chrome")
        'firefox'  # From YAML or env var

        >>> config.get("credentials.username")
        'standard_user'

    Environment Variable Mapping:
        - ui.browser -> UI_BROWSER
        - ui.timeout -> UI_TIMEOUT
        - credentials.password -> CREDENTIALS_PASSWORD
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(
        cls,
        config_path: Optional[Path] = None,
        credentials_path: Optional[Path] = None,
    ) -> "ConfigLoader":
        """Singleton pattern - configuration is loaded only once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_path: Optional[Path] = None,
        credentials_path: Optional[Path] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to run configuration YAML.
                        Uses DEFAULT_CONFIG_PATH if not specified.
            credentials_path: Path to credentials YAML.
                        Uses DEFAULT_CREDENTIALS_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._credentials_path = Path(credentials_path or DEFAULT_CREDENTIALS_PATH)
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load run configuration and credentials from YAML files."""
        config = self._read_yaml(self._config_path)
        config["credentials"] = self._read_yaml(self._credentials_path)
        self._config = config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning(
                f"Configuration file not found: {path}. "
                f"Using defaults and environment variables only."
            )
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        logger.debug(f"Loaded configuration from: {path}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.browser")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section, or an empty dict."""
        return self._config.get(section) or {}

    def reload(self) -> None:
        """Reload configuration from files."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def run_config(self) -> RunConfig:
        """
        Build the immutable snapshot handed to the browser layer and fixtures.

        Raises:
            ConfigurationError: If a numeric setting cannot be parsed or the
                viewport is not a width/height mapping
        """
        defaults = RunConfig()

        credentials = {}
        for key in self.get_section("credentials"):
            value = self.get(f"credentials.{key}")
            if value is not None:
                credentials[key] = str(value)
        for env_key, value in os.environ.items():
            if env_key.startswith("CREDENTIALS_"):
                credentials[env_key[len("CREDENTIALS_"):].lower()] = value

        try:
            timeout = float(self.get("ui.timeout", defaults.timeout))
            viewport = self.get("ui.viewport", {}) or {}
            if not isinstance(viewport, dict):
                raise ConfigurationError(
                    f"ui.viewport must be a mapping with width and height, got {viewport!r}"
                )
            size = (
                int(viewport.get("width", defaults.viewport[0])),
                int(viewport.get("height", defaults.viewport[1])),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric UI setting: {e}") from e

        if timeout <= 0:
            raise ConfigurationError(f"ui.timeout must be positive, got {timeout}")

        return RunConfig(
            browser=self.get("ui.browser", defaults.browser),
            base_url=str(self.get("ui.base_url", defaults.base_url)).rstrip("/"),
            headless=self.get("ui.headless", defaults.headless),
            timeout=timeout,
            viewport=size,
            channel=self.get("ui.channel", defaults.channel),
            install_browsers=self.get("ui.install_browsers", defaults.install_browsers),
            log_level=str(self.get("logging.level", defaults.log_level)),
            log_file=self.get("logging.file", defaults.log_file),
            credentials=MappingProxyType(credentials),
        )

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "RunConfig",
]
