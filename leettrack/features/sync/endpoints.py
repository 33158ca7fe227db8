# Sync feature - pull fresh LeetCode snapshots, auto-sync switch
from fastapi import APIRouter, Depends

from leettrack.common.deps import CurrentUser, get_current_user, require_admin
from leettrack.common.errors import TrackerError, http_error
from .schemas import AppSettingsOut, AppSettingsUpdate, SyncStudentResult, SyncSummary
from .service import sync_service

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("/student/{student_id}", response_model=SyncStudentResult)
async def sync_student(student_id: str, current_user: CurrentUser = Depends(require_admin())):
    try:
        return await sync_service.sync_student(student_id)
    except TrackerError as e:
        raise http_error(e)


@router.post("/all", response_model=SyncSummary)
async def sync_all(current_user: CurrentUser = Depends(require_admin())):
    return await sync_service.sync_all()


@router.get("/settings", response_model=AppSettingsOut)
def get_sync_settings(current_user: CurrentUser = Depends(get_current_user)):
    return sync_service.get_app_settings()


@router.put("/settings", response_model=AppSettingsOut)
def update_sync_settings(req: AppSettingsUpdate, current_user: CurrentUser = Depends(require_admin())):
    return sync_service.set_auto_sync(req.is_auto_sync_enabled)
