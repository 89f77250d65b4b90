from .service import ChartSnapshotService

__all__ = ["ChartSnapshotService"]
