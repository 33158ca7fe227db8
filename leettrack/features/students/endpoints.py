# Students feature - onboarding, listing and admin deletions
from typing import List

from fastapi import APIRouter, Depends, status

from leettrack.common.deps import CurrentUser, get_current_user, require_admin
from leettrack.common.errors import TrackerError, http_error
from .schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CleanupResponse,
    StudentCreate,
    StudentOut,
    StudentUpdate,
)
from .service import student_service

router = APIRouter(prefix="/students", tags=["students"])


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(payload: StudentCreate, current_user: CurrentUser = Depends(require_admin())):
    try:
        return student_service.onboard(payload)
    except TrackerError as e:
        raise http_error(e)


@router.get("", response_model=List[StudentOut])
def list_students(current_user: CurrentUser = Depends(get_current_user)):
    return student_service.list_students()


@router.get("/batches", response_model=List[str])
def list_batches(current_user: CurrentUser = Depends(get_current_user)):
    return student_service.list_batches()


@router.get("/batch/{batch}", response_model=List[StudentOut])
def list_batch_students(batch: str, current_user: CurrentUser = Depends(get_current_user)):
    return student_service.list_students(batch=batch)


#Cleanup: preview then remove students that never solved anything
@router.get("/cleanup/zero", response_model=List[StudentOut])
def list_zero_students(current_user: CurrentUser = Depends(require_admin())):
    return student_service.students_with_zero_questions()


@router.post("/cleanup/zero", response_model=CleanupResponse)
def remove_zero_students(current_user: CurrentUser = Depends(require_admin())):
    removed = student_service.remove_students_with_zero_questions()
    return CleanupResponse(removed_count=len(removed), removed_students=removed)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete(req: BulkDeleteRequest, current_user: CurrentUser = Depends(require_admin())):
    deleted, failed = student_service.bulk_delete(req.handles)
    return BulkDeleteResponse(deleted=deleted, failed=failed)


@router.patch("/{handle}", response_model=StudentOut)
def update_student(handle: str, payload: StudentUpdate, current_user: CurrentUser = Depends(require_admin())):
    try:
        return student_service.update_profile(handle, payload)
    except TrackerError as e:
        raise http_error(e)


@router.delete("/{handle}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(handle: str, current_user: CurrentUser = Depends(require_admin())):
    try:
        student_service.delete_by_handle(handle)
    except TrackerError as e:
        raise http_error(e)
