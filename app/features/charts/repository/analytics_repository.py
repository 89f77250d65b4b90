"""
Weekly view analytics.

`view_analytics` holds one logical row per (item_id, category, week) with
the number of view events recorded that ISO week. Duplicate rows for the
same key may exist and are summed.
"""

from collections.abc import Sequence

from app.db.helpers import fetch_all
from app.features.charts.domain.models import Category


class PostgresAnalyticsRepository:
    async def sum_views(
        self,
        item_ids: Sequence[str],
        category: Category,
        week_key: str | None = None,
        *,
        since_week: str | None = None,
    ) -> dict[str, int]:
        """
        Total views per item.

        Args:
            item_ids: Items to total
            category: Category the rows were recorded under
            week_key: Only count this exact ISO week
            since_week: Only count this ISO week and later

        Returns:
            Mapping of item id to summed views; items without rows are absent
        """
        if not item_ids:
            return {}

        query = """
            SELECT item_id::text AS item_id, SUM(views) AS total_views
            FROM view_analytics
            WHERE category = %s
              AND item_id::text = ANY(%s)
        """
        params: tuple = (category.value, list(item_ids))

        if week_key is not None:
            query += " AND week = %s"
            params += (week_key,)
        if since_week is not None:
            # ISO week keys sort chronologically as strings
            query += " AND week >= %s"
            params += (since_week,)

        query += " GROUP BY item_id"

        rows = await fetch_all(query, params)
        return {row["item_id"]: int(row["total_views"] or 0) for row in rows}
