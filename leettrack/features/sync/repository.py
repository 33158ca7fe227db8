from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from leettrack.features.students.repository import default_session_factory
from .models import AppSettings


class AppSettingsRepository:
    def __init__(self, session_factory: Callable[[], Session] = default_session_factory):
        self._session = session_factory

    def get(self) -> AppSettings:
        with self._session() as db:
            row = db.query(AppSettings).first()
            if row is None:
                row = AppSettings(is_auto_sync_enabled=True)
                db.add(row)
                db.commit()
                db.refresh(row)
            return row

    def update(
        self,
        *,
        last_sync_time: Optional[datetime] = None,
        is_auto_sync_enabled: Optional[bool] = None,
    ) -> AppSettings:
        with self._session() as db:
            row = db.query(AppSettings).first()
            if row is None:
                row = AppSettings(is_auto_sync_enabled=True)
                db.add(row)
            if last_sync_time is not None:
                row.last_sync_time = last_sync_time
            if is_auto_sync_enabled is not None:
                row.is_auto_sync_enabled = is_auto_sync_enabled
            db.commit()
            db.refresh(row)
            return row


app_settings_repository = AppSettingsRepository()
