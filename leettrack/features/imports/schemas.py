from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ImportStats(BaseModel):
    imported: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = []


class RosterImportStats(BaseModel):
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = []


class WeeklyImportRequest(BaseModel):
    """Either already-split ``rows`` (no header) or raw ``csv`` text (with header)."""
    rows: Optional[List[List[str]]] = None
    csv: Optional[str] = None
    backfill_trends: bool = False


class RosterImportRequest(BaseModel):
    rows: Optional[List[List[str]]] = None
    csv: Optional[str] = None


class WeeklyStudent(BaseModel):
    name: str
    handle: str
    profile_link: Optional[str] = None
    batch: Optional[str] = None


class WeeklyScores(BaseModel):
    week1: int
    week2: int
    week3: int
    week4: int
    current_week: Optional[int] = None


class WeeklyIncrements(BaseModel):
    week2_progress: int
    week3_progress: int
    week4_progress: int
    last_week_to_current_increment: int


class WeeklySummary(BaseModel):
    total_score: int
    average_weekly_growth: int


class WeeklyProgressView(BaseModel):
    student: WeeklyStudent
    weekly_data: WeeklyScores
    progress_increments: WeeklyIncrements
    summary: WeeklySummary
    updated_at: Optional[datetime] = None
