"""
Weekly chart snapshot job.

Runs inside the worker service. Each pass records the current ranking of
every category; reruns inside the same ISO week replace that week's
snapshot.
"""

import asyncio

from app.config import settings
from app.db.pool import db_pool
from app.features.charts.dependencies import get_snapshot_service
from app.features.charts.domain.models import Category
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def _record_all_categories() -> dict[str, int]:
    service = get_snapshot_service()
    results: dict[str, int] = {}
    failures = 0

    for category in Category:
        try:
            snapshot = await service.record_weekly_snapshot(category)
            results[category.value] = len(snapshot)
        except Exception as e:
            failures += 1
            logger.error(
                "Chart snapshot failed",
                category=category.value,
                error=str(e),
                error_type=type(e).__name__,
                job_run="chart_snapshot",
            )

    logger.info(
        "Chart snapshot pass finished",
        recorded=results,
        failures=failures,
        job_run="chart_snapshot",
    )
    return results


async def run_chart_snapshot_once() -> dict[str, int]:
    """Record one snapshot per category. Returns entry counts by category."""
    opened_pool = not db_pool.initialized
    if opened_pool:
        await db_pool.initialize()

    try:
        return await _record_all_categories()
    finally:
        # Only close a pool this pass opened
        if opened_pool:
            await db_pool.close()


async def start_chart_snapshot_scheduler() -> None:
    """Record snapshots now and then every CHART_SNAPSHOT_INTERVAL_HOURS."""
    interval_seconds = settings.CHART_SNAPSHOT_INTERVAL_HOURS * 3600
    logger.info(
        "Chart snapshot scheduler started",
        interval_hours=settings.CHART_SNAPSHOT_INTERVAL_HOURS,
    )

    if not db_pool.initialized:
        await db_pool.initialize()

    try:
        while True:
            await _record_all_categories()
            await asyncio.sleep(interval_seconds)
    finally:
        await db_pool.close()


if __name__ == "__main__":
    asyncio.run(start_chart_snapshot_scheduler())
