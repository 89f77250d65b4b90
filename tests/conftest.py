from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import pytest

from app.features.charts.domain.models import (
    Category,
    ChartEntry,
    ChartHistoryEntry,
    ChartSnapshot,
    Clip,
    Collection,
    HistorySummary,
    Track,
)
from app.features.charts.pipeline.aggregation.service import EngagementAggregator
from app.features.charts.pipeline.charts.service import ChartBuilder

# Wednesday of ISO week 2025-W40
NOW = datetime(2025, 10, 1, 12, 0, tzinfo=UTC)
THIS_WEEK = "2025-W40"
LAST_WEEK = "2025-W39"


def make_track(item_id: str, views=0, likes=0, shares=0, downloads=0, age_days=1, **extra):
    return Track(
        id=item_id,
        title=extra.pop("title", f"Song {item_id}"),
        artist=extra.pop("artist", f"Artist {item_id}"),
        genre=extra.pop("genre", "Afrobeats"),
        cover_url=extra.pop("cover_url", f"https://cdn.example.com/{item_id}.jpg"),
        created_at=NOW - timedelta(days=age_days),
        view_count=views,
        like_count=likes,
        share_count=shares,
        download_count=downloads,
        **extra,
    )


def make_collection(item_id: str, views=0, likes=0, shares=0, downloads=0, age_days=1, **extra):
    return Collection(
        id=item_id,
        title=extra.pop("title", f"Album {item_id}"),
        genre=extra.pop("genre", "Gospel"),
        cover_url=extra.pop("cover_url", None),
        created_at=NOW - timedelta(days=age_days),
        view_count=views,
        like_count=likes,
        share_count=shares,
        download_count=downloads,
        **extra,
    )


def make_clip(item_id: str, views=0, likes=0, shares=0, downloads=0, age_days=1, **extra):
    return Clip(
        id=item_id,
        title=extra.pop("title", f"Video {item_id}"),
        genre=extra.pop("genre", None),
        cover_url=extra.pop("cover_url", None),
        created_at=NOW - timedelta(days=age_days),
        view_count=views,
        like_count=likes,
        share_count=shares,
        download_count=downloads,
        **extra,
    )


class FakeContentRepository:
    def __init__(self):
        self.items: dict[Category, list] = {category: [] for category in Category}
        self.calls: list[tuple[Category, datetime | None]] = []
        self.error: Exception | None = None

    def add(self, category: Category, *items):
        self.items[category].extend(items)

    async def find_by_category(self, category, created_after=None):
        self.calls.append((category, created_after))
        if self.error:
            raise self.error
        items = self.items[category]
        if created_after is None:
            return list(items)
        return [item for item in items if item.created_at >= created_after]

    async def find_by_id(self, category, item_id):
        if self.error:
            raise self.error
        return next((item for item in self.items[category] if item.id == item_id), None)


class FakeAnalyticsRepository:
    def __init__(self):
        self.rows: list[tuple[str, Category, str, int]] = []
        self.calls: list[dict] = []

    def add(self, item_id: str, category: Category, week: str, views: int):
        self.rows.append((item_id, category, week, views))

    async def sum_views(self, item_ids, category, week_key=None, *, since_week=None):
        self.calls.append({"week_key": week_key, "since_week": since_week})
        wanted = set(item_ids)
        totals: dict[str, int] = {}
        for item_id, row_category, week, views in self.rows:
            if item_id not in wanted or row_category != category:
                continue
            if week_key is not None and week != week_key:
                continue
            if since_week is not None and week < since_week:
                continue
            totals[item_id] = totals.get(item_id, 0) + views
        return totals


class FakeSnapshotRepository:
    def __init__(self):
        self.snapshots: dict[tuple[Category, str], ChartSnapshot] = {}
        self.puts: list[tuple[Category, str]] = []

    def seed(self, category: Category, week: str, entries: Sequence[tuple[str, int, int, int]]):
        self.snapshots[(category, week)] = ChartSnapshot(
            category=category,
            week=week,
            entries=[
                ChartEntry(item_id=i, position=p, peak=pk, weeks_on=w) for i, p, pk, w in entries
            ],
        )

    async def get(self, category, week_key):
        return self.snapshots.get((category, week_key))

    async def put(self, category, week_key, entries, region="global"):
        self.puts.append((category, week_key))
        self.snapshots[(category, week_key)] = ChartSnapshot(
            category=category, week=week_key, entries=list(entries), region=region
        )

    async def history_summary(self, category, before_week):
        summary: dict[str, HistorySummary] = {}
        for (snap_category, week), snapshot in self.snapshots.items():
            if snap_category != category or week >= before_week:
                continue
            for entry in snapshot.entries:
                best = min(entry.position, entry.peak)
                prior = summary.get(entry.item_id)
                if prior:
                    summary[entry.item_id] = HistorySummary(
                        best_peak=min(prior.best_peak, best), weeks_on=prior.weeks_on + 1
                    )
                else:
                    summary[entry.item_id] = HistorySummary(best_peak=best, weeks_on=1)
        return summary

    async def item_history(self, category, item_id, limit):
        history = []
        for (snap_category, week), snapshot in sorted(
            self.snapshots.items(), key=lambda pair: pair[0][1], reverse=True
        ):
            entry = snapshot.get(item_id) if snap_category == category else None
            if entry:
                history.append(
                    ChartHistoryEntry(
                        week=week, position=entry.position, peak=entry.peak, weeks_on=entry.weeks_on
                    )
                )
        return history[:limit]


class RecordingNotifier:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def publish(self, event, payload):
        self.events.append((event, payload))

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


class FailingNotifier:
    def publish(self, event, payload):
        raise ConnectionError("socket server gone")


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def content_repo():
    return FakeContentRepository()


@pytest.fixture
def analytics_repo():
    return FakeAnalyticsRepository()


@pytest.fixture
def snapshot_repo():
    return FakeSnapshotRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def aggregator(content_repo, analytics_repo, clock):
    return EngagementAggregator(content_repo, analytics_repo, clock=clock)


@pytest.fixture
def chart_builder(aggregator, snapshot_repo, analytics_repo, notifier, clock):
    return ChartBuilder(aggregator, snapshot_repo, analytics_repo, notifier, clock=clock)
