from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class SyncStudentResult(BaseModel):
    student_id: str
    handle: str
    success: bool
    synced_on: Optional[date] = None
    total_solved: Optional[int] = None
    daily_increment: Optional[int] = None
    weekly_increment: Optional[int] = None
    streak: Optional[int] = None
    new_badges: List[str] = []
    error_code: Optional[str] = None
    error: Optional[str] = None


class SyncSummary(BaseModel):
    success: int
    failed: int
    errors: List[str] = []
    finished_at: Optional[datetime] = None


class AppSettingsOut(BaseModel):
    last_sync_time: Optional[datetime] = None
    is_auto_sync_enabled: bool = True

    class Config:
        from_attributes = True


class AppSettingsUpdate(BaseModel):
    is_auto_sync_enabled: bool
