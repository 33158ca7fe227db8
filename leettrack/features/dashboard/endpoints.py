# Dashboard feature - admin/student/batch views, leaderboards, analytics, export
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from leettrack.common.deps import CurrentUser, ensure_admin_or_own_handle, get_current_user, require_admin
from leettrack.common.errors import TrackerError, http_error
from leettrack.common.utils import today_utc
from leettrack.features.badges.schemas import BadgeTypeSummary
from leettrack.features.badges.service import badge_evaluator
from .schemas import AdminDashboardOut, AnalyticsOut, LeaderboardEntry, StudentDashboardOut
from .service import dashboard_service

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/admin", response_model=AdminDashboardOut)
def admin_dashboard(current_user: CurrentUser = Depends(require_admin())):
    return dashboard_service.assemble_admin_dashboard()


#Students may only open their own dashboard
@router.get("/dashboard/student/{handle}", response_model=StudentDashboardOut)
def student_dashboard(handle: str, current_user: CurrentUser = Depends(get_current_user)):
    ensure_admin_or_own_handle(current_user, handle)
    try:
        return dashboard_service.assemble_student_dashboard(handle)
    except TrackerError as e:
        raise http_error(e)


@router.get("/dashboard/batch/{batch}", response_model=AdminDashboardOut)
def batch_dashboard(batch: str, current_user: CurrentUser = Depends(get_current_user)):
    return dashboard_service.assemble_batch_dashboard(batch)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def leaderboard(
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: CurrentUser = Depends(get_current_user),
):
    return dashboard_service.leaderboard(limit=limit)


@router.get("/leaderboard/batch/{batch}", response_model=List[LeaderboardEntry])
def batch_leaderboard(
    batch: str,
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: CurrentUser = Depends(get_current_user),
):
    return dashboard_service.leaderboard(batch=batch, limit=limit)


@router.get("/analytics", response_model=AnalyticsOut)
def analytics(current_user: CurrentUser = Depends(get_current_user)):
    return dashboard_service.analytics()


@router.get("/badges", response_model=List[BadgeTypeSummary])
def badges_overview(current_user: CurrentUser = Depends(get_current_user)):
    return badge_evaluator.badge_overview()


@router.get("/export/csv")
def export_csv(current_user: CurrentUser = Depends(require_admin())):
    filename = f"leetcode-progress-{today_utc().isoformat()}.csv"
    return Response(
        content=dashboard_service.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
