"""
Per-item chart statistics for detail pages.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from app.features.charts.domain.models import Category, ItemChartStats, normalize_item
from app.features.charts.domain.ports import ContentRepository, SnapshotRepository
from app.features.charts.domain.weeks import week_key
from app.features.charts.pipeline.charts.service import ChartBuilder
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HISTORY_WEEKS = 12


class ItemStatsService:
    def __init__(
        self,
        content_repository: ContentRepository,
        snapshot_repository: SnapshotRepository,
        chart_builder: ChartBuilder,
        clock: Callable[[], datetime] | None = None,
        history_weeks: int = DEFAULT_HISTORY_WEEKS,
    ):
        self._content = content_repository
        self._snapshots = snapshot_repository
        self._builder = chart_builder
        self._clock = clock or (lambda: datetime.now(UTC))
        self.history_weeks = history_weeks

    async def get_item_stats(self, category: Category, item_id: str) -> ItemChartStats | None:
        """
        Trending position, current chart position and recent chart history.

        Only persisted snapshots count towards chart position and history.

        Returns:
            Stats for the item, or None when the catalog has no such item
        """
        item = await self._content.find_by_id(category, item_id)
        if item is None:
            return None
        profile = normalize_item(item)

        pool = await self._builder.candidate_pool(category)
        trending_position = None
        trending_score = None
        for position, scored in enumerate(pool, start=1):
            if scored.id == profile.id:
                trending_position = position
                trending_score = scored.trending_score
                break

        snapshot = await self._snapshots.get(category, week_key(self._clock()))
        entry = snapshot.get(profile.id) if snapshot else None

        history = await self._snapshots.item_history(category, profile.id, self.history_weeks)

        logger.debug(
            "Item chart stats resolved",
            category=category.value,
            item_id=profile.id,
            trending_position=trending_position,
            history_weeks=len(history),
        )

        return ItemChartStats(
            id=profile.id,
            category=category,
            title=profile.title,
            trending_position=trending_position,
            trending_score=trending_score,
            chart_position=entry.position if entry else None,
            chart_history=history,
        )
