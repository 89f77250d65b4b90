"""
Weekly chart snapshot writer.

Freezes the current ranking of a category into the snapshot store. Peak and
weeks-on carry over from every earlier snapshot of the category: peak is the
best position ever held, weeks-on counts all charted weeks (not only
consecutive ones). Callers must run at most one writer per category and
week; the store is last-write-wins.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from app.features.charts.domain.models import Category, ChartEntry, ChartSnapshot
from app.features.charts.domain.ports import SnapshotRepository
from app.features.charts.domain.weeks import week_key
from app.infrastructure.observability.logging import get_logger

from ..charts.service import ChartBuilder

logger = get_logger(__name__)


class ChartSnapshotService:
    def __init__(
        self,
        chart_builder: ChartBuilder,
        snapshot_repository: SnapshotRepository,
        clock: Callable[[], datetime] | None = None,
    ):
        self._builder = chart_builder
        self._snapshots = snapshot_repository
        self._clock = clock or (lambda: datetime.now(UTC))

    async def record_weekly_snapshot(
        self, category: Category, region: str = "global"
    ) -> ChartSnapshot:
        week = week_key(self._clock())
        pool = await self._builder.candidate_pool(category)
        history = await self._snapshots.history_summary(category, before_week=week)

        entries = []
        for position, item in enumerate(pool, start=1):
            prior = history.get(item.id)
            entries.append(
                ChartEntry(
                    item_id=item.id,
                    position=position,
                    peak=min(position, prior.best_peak) if prior else position,
                    weeks_on=prior.weeks_on + 1 if prior else 1,
                )
            )

        snapshot = ChartSnapshot(category=category, week=week, entries=entries, region=region)
        await self._snapshots.put(category, week, snapshot.entries, region=region)

        logger.info(
            "Weekly chart snapshot recorded",
            category=category.value,
            week=week,
            entry_count=len(entries),
            returning_items=sum(1 for item in pool if item.id in history),
        )
        return snapshot
