from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class BadgeResponse(BaseModel):
    id: str
    student_id: str
    badge_type: str
    title: str
    description: str
    icon: str
    earned_on: date
    earned_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BadgeHolder(BaseModel):
    student_id: str
    name: str
    handle: str
    times_earned: int
    last_earned_on: date


class BadgeTypeSummary(BaseModel):
    badge_type: str
    title: str
    description: str
    icon: str
    repeatable: bool
    total_awarded: int
    holders: List[BadgeHolder] = []
