"""Team member routes, mounted under ``/projects/{project_id}/members``."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.member_service import MemberService
from server.deps import get_current_user, get_db
from server.schemas import MemberAdd, MemberRoleUpdate

router = APIRouter(tags=["Team Members"])


async def get_service(db: Database = Depends(get_db)) -> MemberService:
    return MemberService(db)


@router.get("")
async def list_members(
    project_id: str,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.list_members(project_id, user.username)


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_member(
    project_id: str,
    body: MemberAdd,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.add_member(project_id, body.username, body.role, user.username)


@router.get("/{username}")
async def get_member(
    project_id: str,
    username: str,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.get_member(project_id, username, user.username)


@router.put("/{username}")
async def update_member_role(
    project_id: str,
    username: str,
    body: MemberRoleUpdate,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.update_role(project_id, username, body.role, user.username)


@router.delete("/{username}")
async def remove_member(
    project_id: str,
    username: str,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.remove_member(project_id, username, user.username)


@router.get("/{username}/permissions")
async def member_permissions(
    project_id: str,
    username: str,
    user: User = Depends(get_current_user),
    svc: MemberService = Depends(get_service),
):
    return svc.get_permissions(project_id, username, user.username)
