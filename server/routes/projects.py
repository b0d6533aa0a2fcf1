"""Project routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.project_service import ProjectService
from server.deps import get_current_user, get_db
from server.schemas import ProjectCreate, ProjectUpdate

router = APIRouter(tags=["Projects"])


async def get_service(db: Database = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get("")
async def list_projects(
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.list_projects(user.username)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.create_project(
        user.username,
        name=body.name,
        description=body.description or "",
        status=body.status,
        start_date=body.start_date,
        end_date=body.end_date,
    )


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.get_project(project_id, user.username)


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.update_project(project_id, user.username, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.delete_project(project_id, user.username)


@router.get("/{project_id}/stats")
async def project_stats(
    project_id: str,
    user: User = Depends(get_current_user),
    svc: ProjectService = Depends(get_service),
):
    return svc.get_stats(project_id, user.username)
