from .service import TrendingRanker, TrendingService

__all__ = ["TrendingRanker", "TrendingService"]
