from redis import Redis
from rq import Queue, Retry
from functools import lru_cache
from typing import Optional
from ..utils.config import get_settings

# Queue names, highest priority first (workers listen in this order)
SCHEDULED_QUEUE = "scheduled"
NOTIFICATIONS_QUEUE = "notifications"
ANALYTICS_QUEUE = "analytics"
ALL_QUEUES = (SCHEDULED_QUEUE, NOTIFICATIONS_QUEUE, ANALYTICS_QUEUE)

@lru_cache(maxsize=1)
def get_redis_connection() -> Redis:
    """Get Redis connection singleton"""
    settings = get_settings()
    return Redis.from_url(settings.redis_url)

def get_queue(name: str) -> Queue:
    """Get RQ queue by name"""
    redis_conn = get_redis_connection()
    return Queue(name, connection=redis_conn, default_timeout=get_settings().job_timeout)

def default_retry() -> Optional[Retry]:
    """
    Retry policy for queued jobs.

    ``job_max_attempts`` counts the first run, so RQ gets one fewer retry.
    Once retries are exhausted RQ moves the job to its FailedJobRegistry.
    """
    settings = get_settings()
    retries = settings.job_max_attempts - 1
    if retries < 1:
        return None
    intervals = list(settings.job_retry_intervals[:retries]) or [0]
    return Retry(max=retries, interval=intervals)
