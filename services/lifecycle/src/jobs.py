"""
Queue entrypoints for the lifecycle sweeps (bills:close-expired, bills:open-scheduled).
"""
import logging
from typing import Optional

from .lifecycle import BillLifecycleService

logger = logging.getLogger(__name__)


def _default_service() -> BillLifecycleService:
    from services.scheduler.src.bootstrap import build_event_dispatcher

    return BillLifecycleService(events=build_event_dispatcher())


def close_expired_bills(service: Optional[BillLifecycleService] = None) -> int:
    service = service or _default_service()
    try:
        closed_count = service.close_expired_bills()
        logger.info(f"CloseExpiredBills job completed. Closed {closed_count} bills.")
        return closed_count
    except Exception as e:
        logger.error(f"CloseExpiredBills job failed: {e}", exc_info=True)
        raise


def open_scheduled_bills(service: Optional[BillLifecycleService] = None) -> int:
    service = service or _default_service()
    try:
        opened_count = service.open_scheduled_bills()
        logger.info(f"OpenScheduledBills job completed. Opened {opened_count} bills.")
        return opened_count
    except Exception as e:
        logger.error(f"OpenScheduledBills job failed: {e}", exc_info=True)
        raise
