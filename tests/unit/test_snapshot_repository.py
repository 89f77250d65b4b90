import json

import pytest

from app.features.charts.domain.models import Category, ChartEntry, ChartHistoryEntry
from app.features.charts.repository import snapshot_repository
from app.features.charts.repository.snapshot_repository import PostgresSnapshotRepository
from tests.conftest import LAST_WEEK, THIS_WEEK

ENTRIES = [
    {"item_id": "b", "position": 2, "peak": 1, "weeks_on": 4},
    {"item_id": "a", "position": 1},
]


class QueryRecorder:
    """Stands in for the db helpers and records every call."""

    def __init__(self, one=None, rows=None):
        self.one = one
        self.rows = rows or []
        self.calls: list[tuple[str, str, tuple]] = []

    async def fetch_one(self, query, params=()):
        self.calls.append(("fetch_one", query, params))
        return self.one

    async def fetch_all(self, query, params=()):
        self.calls.append(("fetch_all", query, params))
        return self.rows

    async def execute_query(self, query, params=()):
        self.calls.append(("execute_query", query, params))
        return 1


@pytest.fixture
def recorder(monkeypatch):
    def install(**kwargs):
        db = QueryRecorder(**kwargs)
        monkeypatch.setattr(snapshot_repository, "fetch_one", db.fetch_one)
        monkeypatch.setattr(snapshot_repository, "fetch_all", db.fetch_all)
        monkeypatch.setattr(snapshot_repository, "execute_query", db.execute_query)
        return db

    return install


@pytest.mark.asyncio
@pytest.mark.parametrize("items", [ENTRIES, json.dumps(ENTRIES)])
async def test_get_decodes_items_from_jsonb_or_text(recorder, items):
    db = recorder(one={"category": "songs", "region": None, "week": THIS_WEEK, "items": items})

    snapshot = await PostgresSnapshotRepository().get(Category.SONGS, THIS_WEEK)

    assert snapshot.week == THIS_WEEK
    assert snapshot.region == "global"
    assert snapshot.get("b") == ChartEntry(item_id="b", position=2, peak=1, weeks_on=4)
    assert snapshot.get("a") == ChartEntry(item_id="a", position=1, peak=1, weeks_on=1)
    assert db.calls[0][2] == ("songs", THIS_WEEK)


@pytest.mark.asyncio
async def test_get_missing_week_returns_none(recorder):
    recorder(one=None)

    assert await PostgresSnapshotRepository().get(Category.VIDEOS, THIS_WEEK) is None


@pytest.mark.asyncio
async def test_get_rejects_corrupt_positions(recorder):
    broken = [{"item_id": "a", "position": 1}, {"item_id": "b", "position": 3}]
    recorder(one={"category": "songs", "region": "global", "week": THIS_WEEK, "items": broken})

    with pytest.raises(ValueError):
        await PostgresSnapshotRepository().get(Category.SONGS, THIS_WEEK)


@pytest.mark.asyncio
async def test_put_upserts_entries_as_json(recorder):
    db = recorder()
    entries = [
        ChartEntry(item_id="a", position=1, peak=1, weeks_on=2),
        ChartEntry(item_id="b", position=2, peak=2, weeks_on=1),
    ]

    await PostgresSnapshotRepository().put(Category.ALBUMS, THIS_WEEK, entries, region="ZM")

    [(helper, query, params)] = db.calls
    assert helper == "execute_query"
    assert "ON CONFLICT (category, week)" in query
    assert params[:3] == ("albums", "ZM", THIS_WEEK)
    assert json.loads(params[3]) == [entry.to_document() for entry in entries]


@pytest.mark.asyncio
async def test_put_validates_positions_before_writing(recorder):
    db = recorder()
    entries = [
        ChartEntry(item_id="a", position=1, peak=1, weeks_on=1),
        ChartEntry(item_id="b", position=1, peak=1, weeks_on=1),
    ]

    with pytest.raises(ValueError):
        await PostgresSnapshotRepository().put(Category.SONGS, THIS_WEEK, entries)
    assert db.calls == []


@pytest.mark.asyncio
async def test_history_summary_maps_rows(recorder):
    db = recorder(
        rows=[
            {"item_id": "a", "best_peak": 1, "weeks_on": 3},
            {"item_id": "b", "best_peak": "4", "weeks_on": "1"},
        ]
    )

    summary = await PostgresSnapshotRepository().history_summary(Category.SONGS, THIS_WEEK)

    assert (summary["a"].best_peak, summary["a"].weeks_on) == (1, 3)
    assert (summary["b"].best_peak, summary["b"].weeks_on) == (4, 1)
    assert db.calls[0][2] == ("songs", THIS_WEEK)
    assert "h.week < %s" in db.calls[0][1]


@pytest.mark.asyncio
async def test_item_history_maps_entries_newest_first(recorder):
    db = recorder(
        rows=[
            {
                "week": THIS_WEEK,
                "entry": {"item_id": "a", "position": 2, "peak": 1, "weeks_on": 3},
            },
            {"week": LAST_WEEK, "entry": json.dumps({"item_id": "a", "position": 1})},
        ]
    )

    history = await PostgresSnapshotRepository().item_history(Category.SONGS, "a", limit=12)

    assert history == [
        ChartHistoryEntry(week=THIS_WEEK, position=2, peak=1, weeks_on=3),
        ChartHistoryEntry(week=LAST_WEEK, position=1, peak=1, weeks_on=1),
    ]
    assert db.calls[0][2] == ("songs", "a", 12)
