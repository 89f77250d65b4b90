"""
Trending ranking.

Orders scored items by trending score, highest first, and slices to the
requested size. Items with equal scores keep the order the aggregator
produced them in; no secondary key is applied and callers must not rely on
any particular tie order.
"""

from collections.abc import Iterable

from app.features.charts.domain.models import Category, ScoredItem
from app.infrastructure.observability.logging import get_logger

from ..aggregation.service import DEFAULT_WINDOW_DAYS, EngagementAggregator

logger = get_logger(__name__)

DEFAULT_LIMIT = 50


class TrendingRanker:
    @staticmethod
    def rank(items: Iterable[ScoredItem], limit: int | None = None) -> list[ScoredItem]:
        # sorted() is stable, including with reverse=True
        ranked = sorted(items, key=lambda item: item.trending_score, reverse=True)
        if limit is None:
            return ranked
        return ranked[: max(limit, 0)]


class TrendingService:
    """Aggregate then rank one category."""

    def __init__(self, aggregator: EngagementAggregator, ranker: TrendingRanker | None = None):
        self._aggregator = aggregator
        self._ranker = ranker or TrendingRanker()

    async def get_trending(
        self,
        category: Category,
        limit: int = DEFAULT_LIMIT,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> list[ScoredItem]:
        scored = await self._aggregator.aggregate(category, window_days)
        ranked = self._ranker.rank(scored, limit)

        logger.info(
            "Trending computed",
            category=category.value,
            window_days=window_days,
            candidates=len(scored),
            returned=len(ranked),
        )
        return ranked
