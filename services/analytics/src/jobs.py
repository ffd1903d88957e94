"""
Queue entrypoints for clause analytics (analytics:update-clause-analytics).
"""
import logging
from typing import List, Optional

from .aggregator import AnalyticsError, ClauseAnalyticsAggregator

logger = logging.getLogger(__name__)


def update_bill_clause_analytics(bill_id: int, aggregator: Optional[ClauseAnalyticsAggregator] = None) -> int:
    """Recompute one bill's clause analytics; returns the number of clauses updated."""
    aggregator = aggregator or ClauseAnalyticsAggregator()
    try:
        return len(aggregator.recompute_clause_analytics(bill_id))
    except Exception as e:
        logger.error(f"Failed to update clause analytics for bill {bill_id}: {e}", exc_info=True)
        raise


def update_clause_analytics(aggregator: Optional[ClauseAnalyticsAggregator] = None) -> int:
    """
    Periodic sweep over every bill currently accepting submissions.

    A failing bill does not stop the others; the sweep raises at the end so
    the run is reported as failed.
    """
    aggregator = aggregator or ClauseAnalyticsAggregator()
    bill_ids = aggregator.repository.get_bill_ids_accepting_submissions()
    updated = 0
    failed: List[int] = []
    for bill_id in bill_ids:
        try:
            aggregator.recompute_clause_analytics(bill_id)
            updated += 1
        except Exception as e:
            logger.error(f"Failed to update clause analytics for bill {bill_id}: {e}", exc_info=True)
            failed.append(bill_id)

    logger.info(f"UpdateClauseAnalytics job completed. Updated {updated} of {len(bill_ids)} bills.")
    if failed:
        raise AnalyticsError(f"Clause analytics failed for bill(s): {', '.join(map(str, failed))}")
    return updated
