from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from leettrack.features.badges.schemas import BadgeResponse
from leettrack.features.leetcode.schemas import LeetCodeStats


class StudentRef(BaseModel):
    id: str
    name: str
    handle: str
    profile_link: Optional[str] = None
    batch: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentRow(BaseModel):
    student: StudentRef
    stats: LeetCodeStats
    weekly_progress: int = 0
    streak: int = 0
    status: str


class LeaderboardEntry(BaseModel):
    rank: int
    student: StudentRef
    weekly_score: int


class AdminDashboardOut(BaseModel):
    total_students: int
    active_students: int
    avg_problems: float
    underperforming: int
    students: List[StudentRow] = []
    leaderboard: List[LeaderboardEntry] = []


class WeekPoint(BaseModel):
    week_start: date
    total_problems: int
    weekly_increment: int


class DailyActivity(BaseModel):
    day: date
    count: int


class StudentDashboardOut(BaseModel):
    student: StudentRef
    stats: LeetCodeStats
    current_streak: int
    longest_streak: int = 0
    weekly_rank: int
    badges: List[BadgeResponse] = []
    weekly_progress: List[WeekPoint] = []
    daily_activity: List[DailyActivity] = []


class AnalyticsSummary(BaseModel):
    total_students: int
    improved: int
    declined: int
    same: int
    average_improvement: float


class StudentImprovement(BaseModel):
    student: StudentRef
    current_solved: int
    previous_solved: int
    improvement: int
    status: str


class AnalyticsOut(BaseModel):
    summary: AnalyticsSummary
    top_students: List[StudentImprovement] = []
    top_improvers: List[StudentImprovement] = []
    students: List[StudentImprovement] = []


class ExportRow(BaseModel):
    name: str
    handle: str
    total_solved: int
    weekly_progress: int
    streak: int
    status: str
