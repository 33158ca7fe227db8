from __future__ import annotations

from pydantic import BaseModel


class LeetCodeStats(BaseModel):
    """Point-in-time snapshot of a handle's cumulative solve counts."""

    total_solved: int = 0
    easy_solved: int = 0
    medium_solved: int = 0
    hard_solved: int = 0
    acceptance_rate: float = 0.0
    ranking: int = 0

    @classmethod
    def zero(cls) -> "LeetCodeStats":
        """Default-filled stats for students that were never synced."""
        return cls()

    @classmethod
    def from_daily(cls, entry) -> "LeetCodeStats":
        if entry is None:
            return cls.zero()
        return cls(
            total_solved=entry.total_solved,
            easy_solved=entry.easy_solved,
            medium_solved=entry.medium_solved,
            hard_solved=entry.hard_solved,
        )
