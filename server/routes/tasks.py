"""Task routes, mounted under ``/projects/{project_id}/tasks``."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.task_service import TaskService
from server.deps import get_current_user, get_db
from server.schemas import TaskCreate, TaskStatusUpdate, TaskUpdate

router = APIRouter(tags=["Tasks"])


async def get_service(db: Database = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("")
async def list_tasks(
    project_id: str,
    status: Optional[str] = None,
    assignee: Optional[str] = None,
    priority: Optional[str] = None,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.list_tasks(project_id, user.username, status=status, assignee=assignee, priority=priority)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    project_id: str,
    body: TaskCreate,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.create_task(
        project_id,
        user.username,
        title=body.title,
        description=body.description or "",
        status=body.status,
        priority=body.priority,
        assignee=body.assignee,
        due_date=body.due_date,
        labels=body.labels,
    )


@router.get("/{task_id}")
async def get_task(
    project_id: str,
    task_id: str,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.get_task(project_id, task_id, user.username)


@router.put("/{task_id}")
async def update_task(
    project_id: str,
    task_id: str,
    body: TaskUpdate,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.update_task(project_id, task_id, user.username, body.model_dump(exclude_unset=True))


@router.patch("/{task_id}/status")
async def update_task_status(
    project_id: str,
    task_id: str,
    body: TaskStatusUpdate,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.update_status(project_id, task_id, user.username, body.status)


@router.delete("/{task_id}")
async def delete_task(
    project_id: str,
    task_id: str,
    user: User = Depends(get_current_user),
    svc: TaskService = Depends(get_service),
):
    return svc.delete_task(project_id, task_id, user.username)
