"""
Domain models for the trending/charts feature.

Catalog entries arrive as one of three variants (Track, Collection, Clip)
that share engagement counters but differ in how they name their performer
and media. `normalize_item` maps any variant onto the common ItemProfile
shape the scoring pipeline works with.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

UNKNOWN_ARTIST = "Unknown Artist"
PLACEHOLDER_COVER = "/assets/images/placeholder_cover.jpg"


class Category(str, Enum):
    """Chart category; the value doubles as the snapshot/analytics key."""

    SONGS = "songs"
    ALBUMS = "albums"
    VIDEOS = "videos"

    @property
    def model_name(self) -> str:
        return {"songs": "Song", "albums": "Album", "videos": "Video"}[self.value]


class SortView(str, Enum):
    THIS_WEEK = "this-week"
    LAST_WEEK = "last-week"
    ALL_TIME = "all-time"


# ---------------------------------------------------------------------------
# Catalog variants
# ---------------------------------------------------------------------------


@dataclass(slots=True, kw_only=True)
class _CatalogItem:
    id: str
    title: str | None
    genre: str | None
    cover_url: str | None
    created_at: datetime
    release_date: datetime | None = None
    view_count: int = 0
    like_count: int = 0
    share_count: int = 0
    download_count: int = 0
    comment_count: int = 0


@dataclass(slots=True, kw_only=True)
class Track(_CatalogItem):
    artist: str | None
    audio_url: str | None = None
    preview_start: float | None = None
    preview_end: float | None = None
    kind: Literal["track"] = "track"


@dataclass(slots=True, kw_only=True)
class Collection(_CatalogItem):
    artist: str | None = None
    curator: str | None = None
    kind: Literal["collection"] = "collection"


@dataclass(slots=True, kw_only=True)
class Clip(_CatalogItem):
    artist: str | None = None
    videographer: str | None = None
    thumbnail_url: str | None = None
    video_url: str | None = None
    kind: Literal["clip"] = "clip"


ContentItem = Track | Collection | Clip

CATEGORY_BY_KIND: dict[str, Category] = {
    "track": Category.SONGS,
    "collection": Category.ALBUMS,
    "clip": Category.VIDEOS,
}


@dataclass(slots=True)
class Snippet:
    start: float
    end: float


@dataclass(slots=True)
class ItemProfile:
    """Variant-independent view of a catalog item."""

    id: str
    category: Category
    title: str
    artist: str | None
    image: str
    video_url: str | None
    genre: str
    created_at: datetime
    release_date: datetime
    view_count: int
    like_count: int
    share_count: int
    download_count: int
    comment_count: int
    snippet: Snippet | None = None
    # Genre as stored, None when the catalog has none
    source_genre: str | None = None


def normalize_item(item: ContentItem) -> ItemProfile:
    """Map any catalog variant onto the common engagement shape."""
    artist = item.artist
    image = item.cover_url
    video_url = None
    snippet = None

    if isinstance(item, Track):
        if item.preview_start is not None and item.preview_end is not None:
            snippet = Snippet(start=item.preview_start, end=item.preview_end)
    elif isinstance(item, Collection):
        artist = artist or item.curator
    elif isinstance(item, Clip):
        artist = artist or item.videographer
        image = image or item.thumbnail_url
        video_url = item.video_url
    else:
        raise TypeError(f"Unsupported catalog item: {type(item).__name__}")

    return ItemProfile(
        id=str(item.id),
        category=CATEGORY_BY_KIND[item.kind],
        title=item.title or "Untitled",
        artist=artist or None,
        image=image or "",
        video_url=video_url,
        genre=item.genre or "Unknown",
        source_genre=item.genre or None,
        created_at=item.created_at,
        release_date=item.release_date or item.created_at,
        view_count=item.view_count or 0,
        like_count=item.like_count or 0,
        share_count=item.share_count or 0,
        download_count=item.download_count or 0,
        comment_count=item.comment_count or 0,
        snippet=snippet,
    )


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ScoredItem:
    """A catalog item with its trending score for one ranking request."""

    profile: ItemProfile
    view_count: int
    trending_score: float

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def category(self) -> Category:
        return self.profile.category


@dataclass(slots=True)
class RankedGlobalItem:
    id: str
    title: str
    artist: str
    cover: str
    genre: str
    category: Category
    trending_score: float
    rank: int
    created_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "cover": self.cover,
            "genre": self.genre,
            "category": self.category.value,
            "trendingScore": self.trending_score,
            "rank": self.rank,
            "createdAt": self.created_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# Chart snapshots
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ChartEntry:
    item_id: str
    position: int
    peak: int
    weeks_on: int

    def to_document(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "position": self.position,
            "peak": self.peak,
            "weeks_on": self.weeks_on,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> ChartEntry:
        position = int(doc["position"])
        return cls(
            item_id=str(doc["item_id"]),
            position=position,
            peak=int(doc.get("peak") or position),
            weeks_on=int(doc.get("weeks_on") or 1),
        )


@dataclass(slots=True)
class ChartSnapshot:
    """
    Ranking of one category for one ISO week.

    Positions must be exactly 1..N. Peak is the historical best and may be
    better than the current position.
    """

    category: Category
    week: str
    entries: list[ChartEntry]
    region: str = "global"
    _by_item: dict[str, ChartEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        positions = sorted(entry.position for entry in self.entries)
        if positions != list(range(1, len(self.entries) + 1)):
            raise ValueError(
                f"Snapshot {self.category.value}/{self.week} "
                f"positions are not 1..{len(self.entries)}"
            )
        self._by_item = {entry.item_id: entry for entry in self.entries}

    def get(self, item_id: str) -> ChartEntry | None:
        return self._by_item.get(item_id)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def synthesize(cls, category: Category, week: str, item_ids: Iterable[str]) -> ChartSnapshot:
        """Implicit snapshot for a week nobody has persisted yet."""
        entries = [
            ChartEntry(item_id=item_id, position=index, peak=index, weeks_on=1)
            for index, item_id in enumerate(item_ids, start=1)
        ]
        return cls(category=category, week=week, entries=entries)


@dataclass(slots=True, frozen=True)
class HistorySummary:
    """Chart history of one item before a given week."""

    best_peak: int
    weeks_on: int


@dataclass(slots=True, frozen=True)
class ChartHistoryEntry:
    week: str
    position: int
    peak: int
    weeks_on: int


# ---------------------------------------------------------------------------
# Chart output
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ChartStats:
    plays: int
    downloads: int
    likes: int
    views: int
    shares: int
    comments: int


@dataclass(slots=True)
class ChartItem:
    id: str
    title: str
    artist: str
    image: str
    position: int
    last_week: int | None
    peak: int | None
    weeks_on: int
    region: str
    genre: str
    release_date: str
    stats: ChartStats
    video_url: str | None = None
    snippet: Snippet | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "image": self.image,
            "videoUrl": self.video_url,
            "position": self.position,
            "lastWeek": self.last_week,
            "peak": self.peak,
            "weeksOn": self.weeks_on,
            "region": self.region,
            "genre": self.genre,
            "releaseDate": self.release_date,
            "stats": {
                "plays": self.stats.plays,
                "downloads": self.stats.downloads,
                "likes": self.stats.likes,
                "views": self.stats.views,
                "shares": self.stats.shares,
                "comments": self.stats.comments,
            },
            "snippet": None,
        }
        if self.snippet is not None:
            payload["snippet"] = {"start": self.snippet.start, "end": self.snippet.end}
        return payload


@dataclass(slots=True)
class ItemChartStats:
    id: str
    category: Category
    title: str
    trending_position: int | None
    trending_score: float | None
    chart_position: int | None
    chart_history: list[ChartHistoryEntry]
