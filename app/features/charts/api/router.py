"""
Trending and charts routes.

Read-only endpoints used by the web UI data loaders. Database outages map
to 503 with a generic message; every other recoverable condition (sparse
windows, missing snapshots, notifier failures) resolves to a normal payload.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from app.config import settings
from app.db.helpers import DatabaseError
from app.features.charts.dependencies import (
    get_chart_builder,
    get_global_merger,
    get_item_stats_service,
    get_trending_service,
)
from app.features.charts.domain.models import Category, ScoredItem, SortView
from app.features.charts.pipeline.charts.service import ChartBuilder
from app.features.charts.pipeline.global_merge.service import GlobalTrendMerger
from app.features.charts.pipeline.ranking.service import TrendingService
from app.features.charts.services.item_stats import ItemStatsService
from app.infrastructure.observability.logging import get_logger
from app.models.api.charts_response import (
    ChartHistoryEntryResponse,
    ChartItemResponse,
    ChartsResponse,
    GlobalTrendingItemResponse,
    GlobalTrendingMeta,
    GlobalTrendingResponse,
    ItemChartStatsResponse,
    ScoredItemResponse,
    TrendingResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["charts"])

UNAVAILABLE_DETAIL = "Chart data temporarily unavailable"


def _unavailable(error: DatabaseError, route: str) -> HTTPException:
    logger.error(
        "Chart data unavailable",
        route=route,
        operation=error.operation,
        error=str(error),
    )
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_DETAIL)


def _internal_error(error: Exception, route: str) -> HTTPException:
    logger.error(
        "Unexpected charts error",
        route=route,
        error=str(error),
        error_type=type(error).__name__,
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load chart data"
    )


def _scored_response(item: ScoredItem) -> ScoredItemResponse:
    profile = item.profile
    return ScoredItemResponse(
        id=profile.id,
        category=profile.category.value,
        title=profile.title,
        artist=profile.artist,
        image=profile.image,
        video_url=profile.video_url,
        genre=profile.genre,
        created_at=profile.created_at,
        view_count=item.view_count,
        like_count=profile.like_count,
        share_count=profile.share_count,
        download_count=profile.download_count,
        trending_score=item.trending_score,
    )


@router.get("/trending", response_model=TrendingResponse)
async def get_trending(
    category: Category = Query(Category.SONGS),
    limit: int = Query(settings.TRENDING_DEFAULT_LIMIT, ge=1, le=500),
    window_days: int = Query(settings.TRENDING_DEFAULT_WINDOW_DAYS, ge=1, le=3650),
    service: TrendingService = Depends(get_trending_service),
):
    """Top items of one category by trending score."""
    try:
        items = await service.get_trending(category, limit=limit, window_days=window_days)
    except DatabaseError as e:
        raise _unavailable(e, "trending")
    except Exception as e:
        raise _internal_error(e, "trending")

    return TrendingResponse(
        category=category.value,
        total=len(items),
        items=[_scored_response(item) for item in items],
    )


@router.get("/charts", response_model=ChartsResponse)
async def get_charts(
    category: Category = Query(Category.SONGS),
    region: str = Query("global", min_length=1, max_length=64),
    sort: SortView = Query(SortView.ALL_TIME),
    limit: int = Query(settings.TRENDING_DEFAULT_LIMIT, ge=1, le=200),
    builder: ChartBuilder = Depends(get_chart_builder),
):
    """Weekly chart for one category with movement since last week."""
    week = builder.current_week()
    try:
        items = await builder.get_charts(
            category, region=region, sort=sort, limit=limit, week=week
        )
    except DatabaseError as e:
        raise _unavailable(e, "charts")
    except Exception as e:
        raise _internal_error(e, "charts")

    return ChartsResponse(
        category=category.value,
        region=region,
        sort=sort.value,
        week=week,
        items=[ChartItemResponse.model_validate(item.to_payload()) for item in items],
    )


@router.get("/trending/global", response_model=GlobalTrendingResponse)
async def get_trending_global(
    limit: int = Query(settings.TRENDING_DEFAULT_LIMIT, ge=1, le=500),
    window_days: int = Query(settings.GLOBAL_TRENDING_DEFAULT_WINDOW_DAYS, ge=1, le=3650),
    merger: GlobalTrendMerger = Depends(get_global_merger),
):
    """Songs, albums and videos ranked together on trending score."""
    try:
        items = await merger.get_trending_global(limit=limit, window_days=window_days)
    except DatabaseError as e:
        raise _unavailable(e, "trending_global")
    except Exception as e:
        raise _internal_error(e, "trending_global")

    return GlobalTrendingResponse(
        total=len(items),
        items=[GlobalTrendingItemResponse.model_validate(item.to_payload()) for item in items],
        meta=GlobalTrendingMeta(window_days=window_days, limit=limit),
    )


@router.get("/items/{category}/{item_id}/stats", response_model=ItemChartStatsResponse)
async def get_item_chart_stats(
    category: Category,
    item_id: str = Path(..., min_length=1, max_length=64),
    service: ItemStatsService = Depends(get_item_stats_service),
):
    """Trending position, chart position and recent chart history for one item."""
    try:
        stats = await service.get_item_stats(category, item_id)
    except DatabaseError as e:
        raise _unavailable(e, "item_stats")
    except Exception as e:
        raise _internal_error(e, "item_stats")

    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    return ItemChartStatsResponse(
        id=stats.id,
        category=stats.category.value,
        title=stats.title,
        trending_position=stats.trending_position,
        trending_score=stats.trending_score,
        chart_position=stats.chart_position,
        chart_history=[
            ChartHistoryEntryResponse(
                week=entry.week,
                position=entry.position,
                peak=entry.peak,
                weeks_on=entry.weeks_on,
            )
            for entry in stats.chart_history
        ],
    )
