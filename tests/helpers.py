"""Plain test helpers shared across test modules.

Imported as ``helpers``; ``tests/`` is on ``sys.path`` through the
``pythonpath`` pytest setting, independent of the import mode.
"""

from datetime import datetime, timezone
from typing import Optional

from breaktool.schemas.verdict import ReviewSnapshot

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def make_review(
    rating: Optional[float] = 4.0,
    role: str = "community",
    helpful: int = 0,
    total: int = 0,
    content: str = "",
) -> ReviewSnapshot:
    return ReviewSnapshot(
        rating=rating,
        reviewer_role=role,
        helpful_votes=helpful,
        total_votes=total,
        content=content,
    )


class FakeResult:
    """Just enough of a SQLAlchemy ``Result`` for the service loaders."""

    def __init__(self, rows=()):
        self.rows = list(rows)

    def scalars(self):
        return self

    def all(self):
        return list(self.rows)

    def one_or_none(self):
        return self.rows[0] if self.rows else None

    def scalar_one_or_none(self):
        return self.rows[0] if self.rows else None


class FakeSession:
    """AsyncSession stand-in that answers ``execute`` calls from a queue.

    Each ``execute`` pops the next queued result; statements are recorded
    so tests can count round trips.
    """

    def __init__(self, *results: FakeResult):
        self.results = list(results)
        self.statements = []
        self.commits = 0

    async def execute(self, statement):
        self.statements.append(statement)
        return self.results.pop(0)

    async def commit(self):
        self.commits += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False
