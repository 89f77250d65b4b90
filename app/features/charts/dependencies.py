"""
Wiring for the charts feature.

Builds the Postgres-backed pipeline once per process. Routes receive the
services through FastAPI `Depends`, so tests can swap them with
`app.dependency_overrides`.
"""

from functools import lru_cache

from app.config import settings

from .domain.ports import Notifier
from .pipeline.aggregation.service import EngagementAggregator
from .pipeline.charts.service import ChartBuilder
from .pipeline.global_merge.service import GlobalTrendMerger
from .pipeline.ranking.service import TrendingService
from .pipeline.snapshots.service import ChartSnapshotService
from .repository import (
    PostgresAnalyticsRepository,
    PostgresContentRepository,
    PostgresSnapshotRepository,
)
from .services.item_stats import ItemStatsService
from .services.notifier import NullNotifier, RedisNotifier


@lru_cache
def get_notifier() -> Notifier:
    if settings.NOTIFIER_ENABLED:
        return RedisNotifier()
    return NullNotifier()


@lru_cache
def get_snapshot_repository() -> PostgresSnapshotRepository:
    return PostgresSnapshotRepository()


@lru_cache
def get_analytics_repository() -> PostgresAnalyticsRepository:
    return PostgresAnalyticsRepository()


@lru_cache
def get_content_repository() -> PostgresContentRepository:
    return PostgresContentRepository()


@lru_cache
def get_aggregator() -> EngagementAggregator:
    return EngagementAggregator(get_content_repository(), get_analytics_repository())


@lru_cache
def get_trending_service() -> TrendingService:
    return TrendingService(get_aggregator())


@lru_cache
def get_chart_builder() -> ChartBuilder:
    return ChartBuilder(
        get_aggregator(),
        get_snapshot_repository(),
        get_analytics_repository(),
        get_notifier(),
        candidate_window_days=settings.CHART_CANDIDATE_WINDOW_DAYS,
        candidate_pool_size=settings.CHART_CANDIDATE_POOL_SIZE,
    )


@lru_cache
def get_global_merger() -> GlobalTrendMerger:
    return GlobalTrendMerger(get_aggregator(), get_notifier())


@lru_cache
def get_snapshot_service() -> ChartSnapshotService:
    return ChartSnapshotService(get_chart_builder(), get_snapshot_repository())


@lru_cache
def get_item_stats_service() -> ItemStatsService:
    return ItemStatsService(
        get_content_repository(),
        get_snapshot_repository(),
        get_chart_builder(),
        history_weeks=settings.CHART_HISTORY_WEEKS,
    )
