"""
Global trending leaderboard.

Aggregates songs, albums and videos concurrently, then ranks them together
on raw trending score with no per-category normalization.
"""

import asyncio
from collections.abc import Iterable, Sequence

from app.features.charts.domain.models import (
    PLACEHOLDER_COVER,
    UNKNOWN_ARTIST,
    Category,
    RankedGlobalItem,
    ScoredItem,
)
from app.features.charts.domain.ports import Notifier
from app.infrastructure.observability.logging import get_logger

from ..aggregation.service import DEFAULT_WINDOW_DAYS, EngagementAggregator
from ..ranking.service import DEFAULT_LIMIT, TrendingRanker

logger = get_logger(__name__)

GLOBAL_UPDATE_EVENT = "trending:update:global"

DEFAULT_GLOBAL_GENRE = "General"


def merge_rankings(
    per_category: Iterable[Sequence[ScoredItem]], limit: int
) -> list[RankedGlobalItem]:
    """Concatenate per-category results, rank on score and number from 1."""
    combined = [item for items in per_category for item in items]
    top = TrendingRanker.rank(combined, limit)

    return [
        RankedGlobalItem(
            id=item.id,
            title=item.profile.title,
            artist=item.profile.artist or UNKNOWN_ARTIST,
            cover=item.profile.image or PLACEHOLDER_COVER,
            genre=item.profile.source_genre or DEFAULT_GLOBAL_GENRE,
            category=item.category,
            trending_score=item.trending_score,
            rank=rank,
            created_at=item.profile.created_at,
        )
        for rank, item in enumerate(top, start=1)
    ]


class GlobalTrendMerger:
    def __init__(self, aggregator: EngagementAggregator, notifier: Notifier):
        self._aggregator = aggregator
        self._notifier = notifier

    async def get_trending_global(
        self, limit: int = DEFAULT_LIMIT, window_days: int = DEFAULT_WINDOW_DAYS
    ) -> list[RankedGlobalItem]:
        # Join-all: one failed category fails the whole leaderboard
        per_category = await asyncio.gather(
            *(self._aggregator.aggregate(category, window_days) for category in Category)
        )

        ranked = merge_rankings(per_category, limit)

        logger.info(
            "Global trending computed",
            window_days=window_days,
            candidates={
                category.value: len(items) for category, items in zip(Category, per_category)
            },
            returned=len(ranked),
        )

        if ranked:
            try:
                self._notifier.publish(
                    GLOBAL_UPDATE_EVENT, {"items": [item.to_payload() for item in ranked]}
                )
            except Exception as e:
                logger.warning("Global trending notification failed", error=str(e))

        return ranked
