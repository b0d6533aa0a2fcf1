"""API client for the project board backend."""

from projectboard.client.api import ApiClient, ApiError, BearerAuth, SessionExpired
from projectboard.client.config import ClientConfig, resolve_client_config
from projectboard.client.session import AuthSession

__all__ = [
    "ApiClient", "ApiError", "BearerAuth", "SessionExpired",
    "ClientConfig", "resolve_client_config",
    "AuthSession",
]
