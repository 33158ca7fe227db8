import uuid

from sqlalchemy import Column, String, Boolean, DateTime

from leettrack.DB.base import Base


class AppSettings(Base):
    """Single-row table holding sync bookkeeping."""

    __tablename__ = "app_settings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    last_sync_time = Column(DateTime(timezone=True), nullable=True)
    is_auto_sync_enabled = Column(Boolean, nullable=False, default=True)
