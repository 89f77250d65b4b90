import asyncio

import pytest

from app.db.helpers import DataUnavailableError
from app.features.charts.domain.models import Category, ScoredItem, normalize_item
from app.features.charts.pipeline.global_merge.service import (
    GLOBAL_UPDATE_EVENT,
    GlobalTrendMerger,
    merge_rankings,
)
from tests.conftest import FailingNotifier, make_clip, make_collection, make_track


def _scored(item) -> ScoredItem:
    profile = normalize_item(item)
    return ScoredItem(
        profile=profile, view_count=profile.view_count, trending_score=profile.view_count
    )


class StubAggregator:
    """Returns canned results per category after a per-category delay."""

    def __init__(self, results, delays=None, error_for=None):
        self.results = results
        self.delays = delays or {}
        self.error_for = error_for
        self.windows: list[int] = []

    async def aggregate(self, category, window_days=7):
        self.windows.append(window_days)
        await asyncio.sleep(self.delays.get(category, 0))
        if category == self.error_for:
            raise DataUnavailableError("connection refused", operation="fetch_all")
        return self.results.get(category, [])


RESULTS = {
    Category.SONGS: [_scored(make_track("t50", views=50)), _scored(make_track("t10", views=10))],
    Category.ALBUMS: [_scored(make_collection("c30", views=30))],
    Category.VIDEOS: [_scored(make_clip("v90", views=90))],
}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "delays",
    [
        {},
        {Category.SONGS: 0.03, Category.ALBUMS: 0.02, Category.VIDEOS: 0.0},
        {Category.SONGS: 0.0, Category.ALBUMS: 0.01, Category.VIDEOS: 0.03},
    ],
)
async def test_merge_order_independent_of_completion_order(delays, notifier):
    merger = GlobalTrendMerger(StubAggregator(RESULTS, delays), notifier)

    ranked = await merger.get_trending_global(limit=3, window_days=30)

    assert [item.id for item in ranked] == ["v90", "t50", "c30"]
    assert [item.rank for item in ranked] == [1, 2, 3]
    assert [item.category for item in ranked] == [Category.VIDEOS, Category.SONGS, Category.ALBUMS]


@pytest.mark.asyncio
async def test_every_category_uses_same_window(notifier):
    aggregator = StubAggregator(RESULTS)

    await GlobalTrendMerger(aggregator, notifier).get_trending_global(limit=10, window_days=14)

    assert aggregator.windows == [14, 14, 14]


@pytest.mark.asyncio
async def test_categories_fetched_concurrently(notifier):
    delays = {category: 0.05 for category in Category}
    merger = GlobalTrendMerger(StubAggregator(RESULTS, delays), notifier)

    loop = asyncio.get_running_loop()
    started = loop.time()
    await merger.get_trending_global(limit=3)

    # Sequential fetches would take at least 0.15s
    assert loop.time() - started < 0.12


@pytest.mark.asyncio
async def test_one_failed_category_fails_the_merge(notifier):
    merger = GlobalTrendMerger(StubAggregator(RESULTS, error_for=Category.ALBUMS), notifier)

    with pytest.raises(DataUnavailableError):
        await merger.get_trending_global(limit=3)
    assert notifier.events == []


@pytest.mark.asyncio
async def test_global_update_published(notifier):
    await GlobalTrendMerger(StubAggregator(RESULTS), notifier).get_trending_global(limit=2)

    [(event, payload)] = notifier.events
    assert event == GLOBAL_UPDATE_EVENT
    assert [row["rank"] for row in payload["items"]] == [1, 2]
    assert payload["items"][0]["category"] == "videos"


@pytest.mark.asyncio
async def test_notifier_failure_is_swallowed():
    merger = GlobalTrendMerger(StubAggregator(RESULTS), FailingNotifier())

    ranked = await merger.get_trending_global(limit=4)

    assert len(ranked) == 4


def test_merge_fills_display_defaults():
    [item] = merge_rankings([[_scored(make_clip("v1", views=1))]], limit=5)

    assert item.artist == "Unknown Artist"
    assert item.cover == "/assets/images/placeholder_cover.jpg"
    assert item.genre == "General"


def test_merge_keeps_stored_unknown_genre():
    ranked = merge_rankings(
        [
            [
                _scored(make_track("t1", views=5, genre="Unknown")),
                _scored(make_track("t2", genre="")),
            ]
        ],
        limit=5,
    )

    assert [item.genre for item in ranked] == ["Unknown", "General"]


def test_merge_of_empty_categories_is_empty():
    assert merge_rankings([[], [], []], limit=10) == []
