"""
Engagement aggregation service.

Loads the catalog items of one category created inside a recency window,
resolves each item's view count from weekly analytics and scores it:

    trending_score = views + likes * 2 + shares * 3 + downloads * 1.5

Shares carry the most weight, then likes, then downloads, with raw views as
the baseline unit. There is no time decay; the score is a flat sum over the
window.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta

from app.features.charts.domain.models import (
    Category,
    ContentItem,
    ItemProfile,
    ScoredItem,
    normalize_item,
)
from app.features.charts.domain.ports import AnalyticsRepository, ContentRepository
from app.features.charts.domain.weeks import week_key
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

VIEW_WEIGHT = 1.0
LIKE_WEIGHT = 2.0
SHARE_WEIGHT = 3.0
DOWNLOAD_WEIGHT = 1.5

# Below this many items the window is discarded for the full catalog
SPARSE_WINDOW_THRESHOLD = 5

DEFAULT_WINDOW_DAYS = 7


def trending_score(profile: ItemProfile, views: int) -> float:
    return (
        views * VIEW_WEIGHT
        + profile.like_count * LIKE_WEIGHT
        + profile.share_count * SHARE_WEIGHT
        + profile.download_count * DOWNLOAD_WEIGHT
    )


class EngagementAggregator:
    def __init__(
        self,
        content_repository: ContentRepository,
        analytics_repository: AnalyticsRepository,
        clock: Callable[[], datetime] | None = None,
    ):
        self._content = content_repository
        self._analytics = analytics_repository
        self._clock = clock or (lambda: datetime.now(UTC))

    async def aggregate(
        self, category: Category, window_days: int = DEFAULT_WINDOW_DAYS
    ) -> list[ScoredItem]:
        """
        Score every item of a category for the given recency window.

        Falls back to the category's full history when the window holds
        fewer than SPARSE_WINDOW_THRESHOLD items. Repository failures
        propagate untouched.

        Returns:
            Scored items in repository order (unsorted)
        """
        window_start = self._clock() - timedelta(days=window_days)
        items = await self._content.find_by_category(category, created_after=window_start)
        since_week: str | None = week_key(window_start)

        if len(items) < SPARSE_WINDOW_THRESHOLD:
            logger.warning(
                "Sparse trending window, falling back to full history",
                category=category.value,
                window_days=window_days,
                found=len(items),
                threshold=SPARSE_WINDOW_THRESHOLD,
            )
            items = await self._content.find_by_category(category)
            since_week = None

        if not items:
            return []

        return await self._score(category, items, since_week)

    async def _score(
        self, category: Category, items: Sequence[ContentItem], since_week: str | None
    ) -> list[ScoredItem]:
        profiles = [normalize_item(item) for item in items]
        analytics_views = await self._analytics.sum_views(
            [profile.id for profile in profiles], category, since_week=since_week
        )

        scored = []
        for profile in profiles:
            # No analytics rows: fall back to the lifetime counter
            views = analytics_views.get(profile.id, profile.view_count)
            scored.append(
                ScoredItem(
                    profile=profile,
                    view_count=views,
                    trending_score=trending_score(profile, views),
                )
            )

        logger.debug(
            "Scored catalog items",
            category=category.value,
            item_count=len(scored),
            with_analytics=len(analytics_views),
        )
        return scored
