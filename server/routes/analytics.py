"""Analytics routes, mounted under ``/projects/{project_id}/analytics``."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.analytics_service import MAX_TIMELINE_DAYS, AnalyticsService
from server.deps import get_current_user, get_db

router = APIRouter(tags=["Analytics"])


async def get_service(db: Database = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


@router.get("")
async def project_analytics(
    project_id: str,
    user: User = Depends(get_current_user),
    svc: AnalyticsService = Depends(get_service),
):
    return svc.project_analytics(project_id, user.username)


@router.get("/timeline")
async def project_timeline(
    project_id: str,
    days: int = Query(30, ge=1, le=MAX_TIMELINE_DAYS),
    user: User = Depends(get_current_user),
    svc: AnalyticsService = Depends(get_service),
):
    return svc.timeline(project_id, user.username, days=days)


@router.get("/member/{username}")
async def member_analytics(
    project_id: str,
    username: str,
    user: User = Depends(get_current_user),
    svc: AnalyticsService = Depends(get_service),
):
    return svc.member_analytics(project_id, username, user.username)
