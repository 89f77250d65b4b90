"""
Services for the charts feature that sit outside the ranking pipeline.
"""

from .item_stats import ItemStatsService
from .notifier import NullNotifier, RedisNotifier

__all__ = ["ItemStatsService", "NullNotifier", "RedisNotifier"]
