"""Authentication routes: signup, login, logout, verify, me."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from projectboard.models.user import User
from projectboard.services.auth_service import AuthService
from server.deps import get_auth_service, get_current_user, get_token
from server.schemas import LoginRequest, SignupRequest

router = APIRouter(tags=["Authentication"])


# Password hashing is CPU-bound; plain ``def`` handlers run in the threadpool.
@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    user = auth.signup(body.username, body.password, email=body.email, full_name=body.full_name)
    return {"message": "User created successfully", "user": user.to_dict()}


@router.post("/login")
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    token, expires_at, user = auth.login(body.username, body.password)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at,
        "user": user.to_dict(),
    }


@router.post("/logout")
async def logout(
    token: str = Depends(get_token),
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    auth.logout(token)
    return {"message": "Logged out successfully", "username": user.username}


@router.get("/verify")
async def verify(user: User = Depends(get_current_user)):
    return {"valid": True, "user": user.to_dict()}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return user.to_dict()
