"""
Postgres-backed repositories for catalog items, view analytics and chart snapshots.
"""

from .analytics_repository import PostgresAnalyticsRepository
from .content_repository import PostgresContentRepository
from .snapshot_repository import PostgresSnapshotRepository

__all__ = [
    "PostgresAnalyticsRepository",
    "PostgresContentRepository",
    "PostgresSnapshotRepository",
]
