"""Analytics service: per-clause submission counts and sentiment."""

from .aggregator import AnalyticsError, ClauseAnalyticsAggregator
from .analytics_repository import AnalyticsRepository

__all__ = ["AnalyticsError", "AnalyticsRepository", "ClauseAnalyticsAggregator"]
