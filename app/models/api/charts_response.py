# app/models/api/charts_response.py
"""
Trending and charts API response models.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoredItemResponse(_CamelModel):
    """Response model for one trending item."""

    id: str = Field(..., description="Item ID")
    category: str = Field(..., description="songs, albums or videos")
    title: str = Field(..., description="Item title")
    artist: str | None = Field(None, description="Primary performer")
    image: str = Field(default="", description="Cover or thumbnail URL")
    video_url: str | None = Field(None, description="Playable video URL")
    genre: str = Field(..., description="Genre")
    created_at: datetime = Field(..., description="When the item was uploaded")
    view_count: int = Field(..., description="Views counted for the scoring window")
    like_count: int = Field(..., description="Lifetime likes")
    share_count: int = Field(..., description="Lifetime shares")
    download_count: int = Field(..., description="Lifetime downloads")
    trending_score: float = Field(..., description="Weighted engagement score")


class TrendingResponse(_CamelModel):
    category: str
    total: int
    items: list[ScoredItemResponse]


class ChartStatsResponse(_CamelModel):
    plays: int = Field(..., description="Lifetime views")
    downloads: int
    likes: int
    views: int = Field(..., description="Views recorded this ISO week")
    shares: int
    comments: int


class SnippetResponse(_CamelModel):
    start: float
    end: float


class ChartItemResponse(_CamelModel):
    """Response model for one chart row."""

    id: str
    title: str
    artist: str
    image: str
    video_url: str | None = None
    position: int = Field(..., description="Position this week")
    last_week: int | None = Field(None, description="Last week's chart rank, null if absent")
    peak: int | None = Field(None, description="Best position ever held")
    weeks_on: int = Field(..., description="Weeks on chart")
    region: str
    genre: str
    release_date: str
    stats: ChartStatsResponse
    snippet: SnippetResponse | None = None


class ChartsResponse(_CamelModel):
    category: str
    region: str
    sort: str
    week: str = Field(..., description="ISO week key, e.g. 2025-W40")
    items: list[ChartItemResponse]


class GlobalTrendingItemResponse(_CamelModel):
    id: str
    title: str
    artist: str
    cover: str
    genre: str
    category: str
    trending_score: float
    rank: int
    created_at: datetime


class GlobalTrendingMeta(_CamelModel):
    window_days: int
    limit: int


class GlobalTrendingResponse(_CamelModel):
    total: int
    items: list[GlobalTrendingItemResponse]
    meta: GlobalTrendingMeta


class ChartHistoryEntryResponse(_CamelModel):
    week: str
    position: int
    peak: int
    weeks_on: int


class ItemChartStatsResponse(_CamelModel):
    id: str
    category: str
    title: str
    trending_position: int | None = None
    trending_score: float | None = None
    chart_position: int | None = None
    chart_history: list[ChartHistoryEntryResponse] = Field(default_factory=list)
