"""
Background jobs for the charts feature.
"""

from .snapshot_job import run_chart_snapshot_once, start_chart_snapshot_scheduler

__all__ = ["run_chart_snapshot_once", "start_chart_snapshot_scheduler"]
