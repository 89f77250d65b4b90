"""
Domain subpackage for the charts feature.
"""

from .models import (
    Category,
    ChartEntry,
    ChartItem,
    ChartSnapshot,
    Clip,
    Collection,
    ContentItem,
    RankedGlobalItem,
    ScoredItem,
    SortView,
    Track,
)

__all__ = [
    "Category",
    "ChartEntry",
    "ChartItem",
    "ChartSnapshot",
    "Clip",
    "Collection",
    "ContentItem",
    "RankedGlobalItem",
    "ScoredItem",
    "SortView",
    "Track",
]
