"""
Chart snapshot store.

`chart_history` keeps one row per (category, week) with the ranked entries
as a JSONB array of {item_id, position, peak, weeks_on}. Writes are
single-row upserts; concurrent writers for the same key are last-write-wins.
"""

import json
from collections.abc import Sequence

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.features.charts.domain.models import (
    Category,
    ChartEntry,
    ChartHistoryEntry,
    ChartSnapshot,
    HistorySummary,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresSnapshotRepository:
    async def get(self, category: Category, week_key: str) -> ChartSnapshot | None:
        row = await fetch_one(
            """
            SELECT category, region, week, items
            FROM chart_history
            WHERE category = %s
              AND week = %s
            """,
            (category.value, week_key),
        )
        if not row:
            return None

        items = row["items"]
        if isinstance(items, str):
            items = json.loads(items)

        return ChartSnapshot(
            category=category,
            week=row["week"],
            region=row.get("region") or "global",
            entries=[ChartEntry.from_document(doc) for doc in items or []],
        )

    async def put(
        self,
        category: Category,
        week_key: str,
        entries: Sequence[ChartEntry],
        region: str = "global",
    ) -> None:
        # Validates the 1..N position invariant before anything is written
        snapshot = ChartSnapshot(
            category=category, week=week_key, entries=list(entries), region=region
        )

        await execute_query(
            """
            INSERT INTO chart_history (category, region, week, items, created_at, updated_at)
            VALUES (%s, %s, %s, %s::jsonb, NOW(), NOW())
            ON CONFLICT (category, week)
            DO UPDATE SET
                region = EXCLUDED.region,
                items = EXCLUDED.items,
                updated_at = NOW()
            """,
            (
                category.value,
                region,
                week_key,
                json.dumps([entry.to_document() for entry in snapshot.entries]),
            ),
        )

        logger.info(
            "Chart snapshot stored",
            category=category.value,
            week=week_key,
            entry_count=len(snapshot),
        )

    async def history_summary(
        self, category: Category, before_week: str
    ) -> dict[str, HistorySummary]:
        """Best position and number of charted weeks per item, before a week."""
        rows = await fetch_all(
            """
            SELECT
                entry->>'item_id' AS item_id,
                MIN(
                    LEAST(
                        (entry->>'position')::int,
                        COALESCE((entry->>'peak')::int, (entry->>'position')::int)
                    )
                ) AS best_peak,
                COUNT(DISTINCT h.week) AS weeks_on
            FROM chart_history h
            CROSS JOIN LATERAL jsonb_array_elements(h.items) AS entry
            WHERE h.category = %s
              AND h.week < %s
            GROUP BY entry->>'item_id'
            """,
            (category.value, before_week),
        )
        return {
            row["item_id"]: HistorySummary(
                best_peak=int(row["best_peak"]), weeks_on=int(row["weeks_on"])
            )
            for row in rows
        }

    async def item_history(
        self, category: Category, item_id: str, limit: int
    ) -> list[ChartHistoryEntry]:
        """Most recent snapshot entries for one item, newest week first."""
        rows = await fetch_all(
            """
            SELECT h.week, entry
            FROM chart_history h
            CROSS JOIN LATERAL jsonb_array_elements(h.items) AS entry
            WHERE h.category = %s
              AND entry->>'item_id' = %s
            ORDER BY h.week DESC
            LIMIT %s
            """,
            (category.value, item_id, limit),
        )

        history = []
        for row in rows:
            entry = row["entry"]
            if isinstance(entry, str):
                entry = json.loads(entry)
            chart_entry = ChartEntry.from_document(entry)
            history.append(
                ChartHistoryEntry(
                    week=row["week"],
                    position=chart_entry.position,
                    peak=chart_entry.peak,
                    weeks_on=chart_entry.weeks_on,
                )
            )
        return history
