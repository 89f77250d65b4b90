"""
Engagement aggregation package.

Turns catalog items plus weekly view analytics into scored items.
"""

from .service import EngagementAggregator

__all__ = ["EngagementAggregator"]
