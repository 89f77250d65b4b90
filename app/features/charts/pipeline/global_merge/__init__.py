from .service import GlobalTrendMerger

__all__ = ["GlobalTrendMerger"]
