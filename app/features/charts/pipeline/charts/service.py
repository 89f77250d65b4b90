"""
Chart building service.

Builds one category's chart for the current ISO week:

1. Aggregate and rank a wide candidate pool (365 days, 200 items) so chart
   lookups see full context regardless of the requested page size.
2. Read this week's and last week's snapshots. When this week has no
   persisted snapshot yet, one is synthesized from the pool order with
   position = peak = rank and weeks_on = 1.
3. For the top `limit` candidates resolve position/peak/weeks_on from this
   week's snapshot and last_week from last week's entry.
4. `stats.views` is this week's analytics total, while ranking uses the
   365-day window. `stats.plays` is the lifetime view counter.
5. Sort by the requested view and notify subscribers.

The builder only reads snapshots; writing them is the weekly job's concern.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

from app.features.charts.domain.models import (
    UNKNOWN_ARTIST,
    Category,
    ChartItem,
    ChartSnapshot,
    ChartStats,
    ScoredItem,
    SortView,
)
from app.features.charts.domain.ports import AnalyticsRepository, Notifier, SnapshotRepository
from app.features.charts.domain.weeks import current_and_previous_week, previous_week
from app.infrastructure.observability.logging import get_logger

from ..aggregation.service import EngagementAggregator
from ..ranking.service import TrendingRanker

logger = get_logger(__name__)

CANDIDATE_WINDOW_DAYS = 365
CANDIDATE_POOL_SIZE = 200
DEFAULT_LIMIT = 50

# Sort key for items that did not chart last week
UNRANKED_SORT_KEY = 999

CATEGORY_UPDATE_EVENT = "charts:update:category"
ITEM_UPDATE_EVENT = "charts:update:item"


def sort_chart_items(items: list[ChartItem], sort: SortView) -> list[ChartItem]:
    if sort is SortView.THIS_WEEK:
        return sorted(items, key=lambda item: item.position)
    if sort is SortView.LAST_WEEK:
        return sorted(
            items,
            key=lambda item: item.last_week if item.last_week is not None else UNRANKED_SORT_KEY,
        )
    if sort is SortView.ALL_TIME:
        return sorted(items, key=lambda item: item.stats.plays, reverse=True)
    raise ValueError(f"Unknown chart sort view: {sort!r}")


class ChartBuilder:
    def __init__(
        self,
        aggregator: EngagementAggregator,
        snapshot_repository: SnapshotRepository,
        analytics_repository: AnalyticsRepository,
        notifier: Notifier,
        ranker: TrendingRanker | None = None,
        clock: Callable[[], datetime] | None = None,
        candidate_window_days: int = CANDIDATE_WINDOW_DAYS,
        candidate_pool_size: int = CANDIDATE_POOL_SIZE,
    ):
        self._aggregator = aggregator
        self._snapshots = snapshot_repository
        self._analytics = analytics_repository
        self._notifier = notifier
        self._ranker = ranker or TrendingRanker()
        self._clock = clock or (lambda: datetime.now(UTC))
        self.candidate_window_days = candidate_window_days
        self.candidate_pool_size = candidate_pool_size

    def current_week(self) -> str:
        return current_and_previous_week(self._clock())[0]

    async def candidate_pool(self, category: Category) -> list[ScoredItem]:
        scored = await self._aggregator.aggregate(category, self.candidate_window_days)
        return self._ranker.rank(scored, self.candidate_pool_size)

    async def get_charts(
        self,
        category: Category,
        region: str = "global",
        sort: SortView = SortView.ALL_TIME,
        limit: int = DEFAULT_LIMIT,
        week: str | None = None,
    ) -> list[ChartItem]:
        """
        Build the chart for a category.

        Args:
            category: Chart category
            region: Label copied onto every row; does not filter items
            sort: this-week, last-week or all-time ordering
            limit: Maximum number of rows
            week: ISO week to build for; defaults to the week of the clock

        Returns:
            Chart rows ordered by the requested view
        """
        category = Category(category)
        sort = SortView(sort)

        pool = await self.candidate_pool(category)
        if not pool:
            return []

        if week is None:
            this_week, last_week = current_and_previous_week(self._clock())
        else:
            this_week, last_week = week, previous_week(week)
        current_snapshot, previous_snapshot = await asyncio.gather(
            self._snapshots.get(category, this_week),
            self._snapshots.get(category, last_week),
        )

        if current_snapshot is None:
            logger.info(
                "No chart snapshot for current week, synthesizing from ranking",
                category=category.value,
                week=this_week,
                pool_size=len(pool),
            )
            current_snapshot = ChartSnapshot.synthesize(
                category, this_week, (item.id for item in pool)
            )

        top = pool[: max(limit, 0)]
        week_views = await self._analytics.sum_views(
            [item.id for item in top], category, week_key=this_week
        )

        items = [
            self._to_chart_item(
                index,
                scored,
                current_snapshot,
                previous_snapshot,
                region,
                week_views.get(scored.id, 0),
            )
            for index, scored in enumerate(top)
        ]
        items = sort_chart_items(items, sort)

        logger.info(
            "Chart built",
            category=category.value,
            region=region,
            sort=sort.value,
            week=this_week,
            returned=len(items),
            previous_snapshot=previous_snapshot is not None,
        )

        self._notify(category, items)
        return items

    @staticmethod
    def _to_chart_item(
        index: int,
        scored: ScoredItem,
        current: ChartSnapshot,
        previous: ChartSnapshot | None,
        region: str,
        week_views: int,
    ) -> ChartItem:
        profile = scored.profile
        entry = current.get(scored.id)
        last = previous.get(scored.id) if previous is not None else None

        # Persisted snapshots can drift from today's pool
        position = entry.position if entry else index + 1
        peak = entry.peak if entry else index + 1
        weeks_on = entry.weeks_on if entry else 1

        return ChartItem(
            id=profile.id,
            title=profile.title,
            artist=profile.artist or UNKNOWN_ARTIST,
            image=profile.image,
            video_url=profile.video_url,
            position=position,
            last_week=last.peak if last else None,
            peak=peak,
            weeks_on=weeks_on,
            region=region,
            genre=profile.genre,
            release_date=profile.release_date.isoformat(),
            stats=ChartStats(
                plays=profile.view_count,
                downloads=profile.download_count,
                likes=profile.like_count,
                views=week_views,
                shares=profile.share_count,
                comments=profile.comment_count,
            ),
            snippet=profile.snippet,
        )

    def _notify(self, category: Category, items: list[ChartItem]) -> None:
        if len(items) <= 1:
            return

        self._publish(
            category,
            CATEGORY_UPDATE_EVENT,
            {"category": category.value, "items": [item.to_payload() for item in items]},
        )
        for item in items:
            self._publish(category, ITEM_UPDATE_EVENT, {"id": item.id, "newPos": item.position})

    def _publish(self, category: Category, event: str, payload: dict) -> None:
        # Events are published independently of each other
        try:
            self._notifier.publish(event, payload)
        except Exception as e:
            logger.warning(
                "Chart update notification failed",
                category=category.value,
                event_name=event,
                error=str(e),
            )
