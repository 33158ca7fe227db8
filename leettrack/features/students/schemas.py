"""Pydantic models for student resources."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class StudentBase(BaseModel):
    """Base student fields."""
    name: str
    handle: str = Field(..., min_length=1)
    profile_link: Optional[str] = None
    batch: Optional[str] = None


class StudentCreate(StudentBase):
    """Schema for onboarding a student."""
    pass


class StudentUpdate(BaseModel):
    """Profile metadata is the only mutable part of a student."""
    name: Optional[str] = None
    profile_link: Optional[str] = None
    batch: Optional[str] = None


class StudentOut(BaseModel):
    id: str
    name: str
    handle: str
    profile_link: str
    batch: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkDeleteRequest(BaseModel):
    handles: List[str]


class BulkDeleteResponse(BaseModel):
    deleted: int
    failed: int


class CleanupResponse(BaseModel):
    removed_count: int
    removed_students: List[StudentOut] = []
