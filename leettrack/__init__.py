"""LeetTrack: cohort LeetCode progress tracking.

Daily snapshots, weekly trends, streaks and badges are served over a FastAPI
app. ``leettrack.app`` is resolved on first access, so migrations and the
scheduler script can import settings and models without building the app.
"""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name == "app":
        from .main import app
        return app
    raise AttributeError(f"module {__name__} has no attribute {name!r}")
