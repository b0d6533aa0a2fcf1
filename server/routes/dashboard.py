"""Dashboard routes, mounted at the root."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from projectboard.db.database import Database
from projectboard.models.user import User
from projectboard.services.dashboard_service import MAX_ACTIVITY_LIMIT, DashboardService
from server.deps import get_current_user, get_db

router = APIRouter(tags=["Dashboard"])


async def get_service(db: Database = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


@router.get("/dashboard")
async def dashboard(
    user: User = Depends(get_current_user),
    svc: DashboardService = Depends(get_service),
):
    return svc.summary(user)


@router.get("/dashboard/summary")
async def quick_summary(
    user: User = Depends(get_current_user),
    svc: DashboardService = Depends(get_service),
):
    return svc.quick_summary(user)


@router.get("/dashboard/recent-activity")
async def recent_activity(
    limit: int = Query(10, ge=1, le=MAX_ACTIVITY_LIMIT),
    user: User = Depends(get_current_user),
    svc: DashboardService = Depends(get_service),
):
    return svc.recent_activity(user, limit=limit)
