"""
Chart building package.

Combines the ranked candidate pool with this week's and last week's
snapshots into chart rows.
"""

from .service import ChartBuilder

__all__ = ["ChartBuilder"]
