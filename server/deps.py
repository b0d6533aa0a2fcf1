"""FastAPI dependencies: database, settings and the authenticated caller."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from projectboard.config import Settings
from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.auth_service import AuthService
from projectboard.errors import AuthenticationError

_bearer = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> Database:
    return request.app.state.db


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_auth_service(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, token_ttl_hours=settings.TOKEN_TTL_HOURS, bcrypt_rounds=settings.BCRYPT_ROUNDS)


async def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_token),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    return auth.authenticate(token)
