"""
Capabilities the charts pipeline needs from its collaborators.

The Postgres repositories and the Redis notifier implement these; tests
substitute in-memory fakes.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from .models import (
    Category,
    ChartEntry,
    ChartHistoryEntry,
    ChartSnapshot,
    ContentItem,
    HistorySummary,
)


class ContentRepository(Protocol):
    async def find_by_category(
        self, category: Category, created_after: datetime | None = None
    ) -> list[ContentItem]: ...

    async def find_by_id(self, category: Category, item_id: str) -> ContentItem | None: ...


class AnalyticsRepository(Protocol):
    async def sum_views(
        self,
        item_ids: Sequence[str],
        category: Category,
        week_key: str | None = None,
        *,
        since_week: str | None = None,
    ) -> dict[str, int]: ...


class SnapshotRepository(Protocol):
    async def get(self, category: Category, week_key: str) -> ChartSnapshot | None: ...

    async def put(
        self,
        category: Category,
        week_key: str,
        entries: Sequence[ChartEntry],
        region: str = "global",
    ) -> None: ...

    async def history_summary(
        self, category: Category, before_week: str
    ) -> dict[str, HistorySummary]: ...

    async def item_history(
        self, category: Category, item_id: str, limit: int
    ) -> list[ChartHistoryEntry]: ...


class Notifier(Protocol):
    """Fire-and-forget event fan-out. Must not block or raise into the caller."""

    def publish(self, event: str, payload: dict[str, Any]) -> None: ...
