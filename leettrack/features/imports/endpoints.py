# Imports feature - spreadsheet weekly grid and roster onboarding
from typing import List

from fastapi import APIRouter, Depends

from leettrack.common.deps import CurrentUser, get_current_user, require_admin
from leettrack.common.errors import MalformedInput, TrackerError, http_error
from .schemas import ImportStats, RosterImportRequest, RosterImportStats, WeeklyImportRequest, WeeklyProgressView
from .service import import_service

router = APIRouter(tags=["imports"])


@router.post("/import/weekly-progress", response_model=ImportStats)
def import_weekly_progress(req: WeeklyImportRequest, current_user: CurrentUser = Depends(require_admin())):
    if req.csv is not None:
        return import_service.import_weekly_snapshot_csv(req.csv, backfill_trends=req.backfill_trends)
    if req.rows is not None:
        return import_service.import_weekly_snapshot(req.rows, backfill_trends=req.backfill_trends)
    raise http_error(MalformedInput("either 'rows' or 'csv' is required"))


@router.post("/import/roster", response_model=RosterImportStats)
def import_roster(req: RosterImportRequest, current_user: CurrentUser = Depends(require_admin())):
    if req.csv is not None:
        return import_service.import_roster_csv(req.csv)
    if req.rows is not None:
        return import_service.import_roster(req.rows)
    raise http_error(MalformedInput("either 'rows' or 'csv' is required"))


@router.get("/weekly-progress", response_model=List[WeeklyProgressView])
def weekly_progress(current_user: CurrentUser = Depends(get_current_user)):
    return import_service.weekly_progress_grid()


@router.get("/weekly-progress/{handle}", response_model=WeeklyProgressView)
def student_weekly_progress(handle: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        return import_service.student_weekly_progress(handle)
    except TrackerError as e:
        raise http_error(e)
