import pytest

from app.features.charts.domain.models import Category
from app.features.charts.jobs import snapshot_job
from app.jobs import worker


@pytest.mark.asyncio
async def test_run_worker_runs_job(monkeypatch):
    called = {"ok": False}

    async def dummy_job():
        called["ok"] = True

    monkeypatch.setitem(worker.JOB_REGISTRY, "dummy", dummy_job)

    await worker.run_worker("dummy")

    assert called["ok"] is True


@pytest.mark.asyncio
async def test_run_worker_unknown_job():
    with pytest.raises(ValueError):
        await worker.run_worker("missing")


def test_registry_exposes_chart_snapshot_jobs():
    assert worker.JOB_REGISTRY["chart_snapshot"] is snapshot_job.start_chart_snapshot_scheduler
    assert worker.JOB_REGISTRY["chart_snapshot_once"] is snapshot_job.run_chart_snapshot_once


class _Snapshot:
    def __init__(self, size):
        self.size = size

    def __len__(self):
        return self.size


class _StubSnapshotService:
    async def record_weekly_snapshot(self, category):
        if category is Category.ALBUMS:
            raise RuntimeError("pool exhausted")
        return _Snapshot(3)


class _StubPool:
    def __init__(self, initialized):
        self.initialized = initialized
        self.opened = 0
        self.closed = 0

    async def initialize(self):
        self.opened += 1
        self.initialized = True

    async def close(self):
        self.closed += 1
        self.initialized = False


@pytest.mark.asyncio
async def test_snapshot_pass_continues_after_category_failure(monkeypatch):
    monkeypatch.setattr(snapshot_job, "db_pool", _StubPool(initialized=True))
    monkeypatch.setattr(snapshot_job, "get_snapshot_service", lambda: _StubSnapshotService())

    results = await snapshot_job.run_chart_snapshot_once()

    assert results == {"songs": 3, "videos": 3}


@pytest.mark.asyncio
async def test_single_pass_closes_the_pool_it_opened(monkeypatch):
    pool = _StubPool(initialized=False)
    monkeypatch.setattr(snapshot_job, "db_pool", pool)
    monkeypatch.setattr(snapshot_job, "get_snapshot_service", lambda: _StubSnapshotService())

    await snapshot_job.run_chart_snapshot_once()

    assert (pool.opened, pool.closed) == (1, 1)


@pytest.mark.asyncio
async def test_single_pass_leaves_shared_pool_open(monkeypatch):
    pool = _StubPool(initialized=True)
    monkeypatch.setattr(snapshot_job, "db_pool", pool)
    monkeypatch.setattr(snapshot_job, "get_snapshot_service", lambda: _StubSnapshotService())

    await snapshot_job.run_chart_snapshot_once()

    assert (pool.opened, pool.closed) == (0, 0)


@pytest.mark.asyncio
async def test_pool_closed_when_pass_raises(monkeypatch):
    pool = _StubPool(initialized=False)
    monkeypatch.setattr(snapshot_job, "db_pool", pool)

    def broken_service():
        raise RuntimeError("wiring failed")

    monkeypatch.setattr(snapshot_job, "get_snapshot_service", broken_service)

    with pytest.raises(RuntimeError):
        await snapshot_job.run_chart_snapshot_once()
    assert pool.closed == 1
