"""
Repository-level pytest configuration.

Why this exists:
  - Register command line options before any test package conftest loads
  - Provide safe environment defaults for local runs (public demo site only)

Important:
  Credentials for the public Sauce Demo site live in
  saucedemo_e2e/config/credentials.yaml. Real projects should inject
  secrets through CREDENTIALS_* environment variables in CI/CD.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


pytest_plugins = ["pytester"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run browser end-to-end scenarios against the live application",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Set environment defaults if not already provided by the user/CI.

    This keeps local runs predictable.
    """
    defaults = {
        "ENVIRONMENT": "dev",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
