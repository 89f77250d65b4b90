"""
Pipeline components for trending and charts.

aggregation -> ranking -> charts, with global_merge running the first two
stages across every category and snapshots persisting weekly rankings.
"""

__all__ = ["aggregation", "ranking", "charts", "global_merge", "snapshots"]
