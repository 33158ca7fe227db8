import sys
import os
from datetime import date

import pytest

# Ensure repo root on sys.path for imports like `leettrack...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read once at import; point everything at a private in-memory db.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_SYNC_ON_STARTUP"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DEBUG"] = "false"

from leettrack.DB.base import Base  # noqa: E402
from leettrack.DB.session import engine  # noqa: E402
import leettrack.DB.models  # noqa: E402,F401
from leettrack.features.leetcode.schemas import LeetCodeStats  # noqa: E402
from leettrack.features.students.repository import student_repository  # noqa: E402

# A Saturday, so "today" and the six days before share one Sunday-start week.
TODAY = date(2024, 3, 16)


@pytest.fixture(autouse=True)
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_student():
    def _make(handle: str, name: str = None, batch: str = None):
        return student_repository.create_student(
            {
                "name": name or handle.title(),
                "handle": handle,
                "profile_link": f"https://leetcode.com/u/{handle}/",
                "batch": batch,
            }
        )

    return _make


def stats(total: int = 0, easy: int = 0, medium: int = 0, hard: int = 0, acceptance: float = 0.0) -> LeetCodeStats:
    return LeetCodeStats(
        total_solved=total,
        easy_solved=easy,
        medium_solved=medium,
        hard_solved=hard,
        acceptance_rate=acceptance,
    )
