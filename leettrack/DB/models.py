# Import all models here so Alembic can discover them
from leettrack.DB.base import Base

# Student first (referenced by every other table)
from leettrack.features.students.models import Student
from leettrack.features.progress.models import DailyProgress, WeeklyTrend
from leettrack.features.badges.models import Badge
from leettrack.features.imports.models import WeeklyProgressData
from leettrack.features.sync.models import AppSettings

# This ensures all models are registered with SQLAlchemy
__all__ = [
    "Base",
    "Student",
    "DailyProgress",
    "WeeklyTrend",
    "Badge",
    "WeeklyProgressData",
    "AppSettings",
]
