"""
Read-only access to the media catalog.

Each category lives in its own table (songs, albums, videos). Engagement
counters are the sizes of the append-only membership arrays the interaction
endpoints maintain (viewed_by, liked_by, shared_by, downloaded_by).
"""

from datetime import datetime
from typing import Any

from app.db.helpers import fetch_all, fetch_one
from app.features.charts.domain.models import Category, Clip, Collection, ContentItem, Track
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_ENGAGEMENT_COLUMNS = """
    COALESCE(cardinality(t.viewed_by), 0) AS view_count,
    COALESCE(cardinality(t.liked_by), 0) AS like_count,
    COALESCE(cardinality(t.shared_by), 0) AS share_count,
    COALESCE(cardinality(t.downloaded_by), 0) AS download_count,
    (
        SELECT COUNT(*)
        FROM comments c
        WHERE c.target_id = t.id
          AND c.target_category = %s
    ) AS comment_count
"""

_SELECTS: dict[Category, str] = {
    Category.SONGS: f"""
        SELECT
            t.id::text AS id,
            t.title,
            t.artist,
            t.genre,
            t.cover_url,
            t.file_url AS audio_url,
            t.preview_start,
            t.preview_end,
            t.created_at,
            t.release_date,
            {_ENGAGEMENT_COLUMNS}
        FROM songs t
    """,
    Category.ALBUMS: f"""
        SELECT
            t.id::text AS id,
            t.title,
            t.artist,
            t.curator,
            t.genre,
            t.cover_url,
            t.created_at,
            t.release_date,
            {_ENGAGEMENT_COLUMNS}
        FROM albums t
    """,
    Category.VIDEOS: f"""
        SELECT
            t.id::text AS id,
            t.title,
            t.artist,
            t.videographer,
            t.genre,
            t.cover_url,
            t.thumbnail_url,
            t.video_url,
            t.created_at,
            t.release_date,
            {_ENGAGEMENT_COLUMNS}
        FROM videos t
    """,
}


def row_to_item(category: Category, row: dict[str, Any]) -> ContentItem:
    """Build the catalog variant for a category from a result row."""
    common = {
        "id": str(row["id"]),
        "title": row.get("title"),
        "genre": row.get("genre"),
        "cover_url": row.get("cover_url"),
        "created_at": row["created_at"],
        "release_date": row.get("release_date"),
        "view_count": int(row.get("view_count") or 0),
        "like_count": int(row.get("like_count") or 0),
        "share_count": int(row.get("share_count") or 0),
        "download_count": int(row.get("download_count") or 0),
        "comment_count": int(row.get("comment_count") or 0),
    }

    if category is Category.SONGS:
        return Track(
            **common,
            artist=row.get("artist"),
            audio_url=row.get("audio_url"),
            preview_start=row.get("preview_start"),
            preview_end=row.get("preview_end"),
        )
    if category is Category.ALBUMS:
        return Collection(**common, artist=row.get("artist"), curator=row.get("curator"))
    return Clip(
        **common,
        artist=row.get("artist"),
        videographer=row.get("videographer"),
        thumbnail_url=row.get("thumbnail_url"),
        video_url=row.get("video_url"),
    )


class PostgresContentRepository:
    """Raw SQL lookups over the catalog tables."""

    async def find_by_category(
        self, category: Category, created_after: datetime | None = None
    ) -> list[ContentItem]:
        query = _SELECTS[category]
        params: tuple = (category.value,)
        if created_after is not None:
            query += " WHERE t.created_at >= %s"
            params += (created_after,)

        rows = await fetch_all(query, params)
        logger.debug(
            "Fetched catalog items",
            category=category.value,
            created_after=created_after.isoformat() if created_after else None,
            count=len(rows),
        )
        return [row_to_item(category, row) for row in rows]

    async def find_by_id(self, category: Category, item_id: str) -> ContentItem | None:
        query = _SELECTS[category] + " WHERE t.id::text = %s"
        row = await fetch_one(query, (category.value, item_id))
        return row_to_item(category, row) if row else None
