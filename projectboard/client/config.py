"""
Client configuration, resolved once when the client is constructed.

Base URL precedence:
  1. explicit ``base_url`` argument
  2. explicit environment override (PROJECTBOARD_API_URL, then the legacy
     frontend variables VITE_BACKEND_URL / REACT_APP_API_URL)
  3. default for the environment named by PROJECTBOARD_ENV
  4. hardcoded fallback
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

OVERRIDE_ENV_KEYS = ("PROJECTBOARD_API_URL", "VITE_BACKEND_URL", "REACT_APP_API_URL")
ENVIRONMENT_ENV_KEY = "PROJECTBOARD_ENV"

ENVIRONMENT_DEFAULTS = {
    "development": "http://localhost:8012",
    "production": "http://backend:8012",
}
FALLBACK_BASE_URL = "http://localhost:8012"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    source: str  # "argument", "override", "environment" or "fallback"
    environment: Optional[str] = None
    timeout: Optional[float] = None
    login_path: str = "/login"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"


def resolve_client_config(
    base_url: Optional[str] = None,
    environment: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> ClientConfig:
    env = os.environ if env is None else env
    environment = (environment or env.get(ENVIRONMENT_ENV_KEY) or "").strip().lower() or None

    if base_url:
        return ClientConfig(base_url.rstrip("/"), "argument", environment, timeout)

    for key in OVERRIDE_ENV_KEYS:
        value = env.get(key)
        if value:
            return ClientConfig(value.rstrip("/"), "override", environment, timeout)

    if environment in ENVIRONMENT_DEFAULTS:
        return ClientConfig(ENVIRONMENT_DEFAULTS[environment], "environment", environment, timeout)

    return ClientConfig(FALLBACK_BASE_URL, "fallback", environment, timeout)
