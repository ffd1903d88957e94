"""
Process-wide periodic scheduler.

Lifecycle:
    scheduler = Scheduler.from_settings()   # init: wires queue + redis
    scheduler.start()                       # blocks; SIGTERM/SIGINT stop it
    scheduler.shutdown()                    # teardown: stop loop, restore handlers

Every node in a deployment may run a scheduler. A due run slot is claimed
with ``SET NX EX`` so exactly one node enqueues it, and the queued job runs
under a non-blocking per-task Redis lock so a run still in flight makes the
next one skip instead of overlapping.
"""
import logging
import os
import signal
import socket
import threading
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from redis import Redis
from redis.exceptions import LockError

from shared.queue.rq_client import SCHEDULED_QUEUE, get_queue, get_redis_connection
from shared.utils.config import get_settings

from .tasks import SCHEDULE, ScheduledTask, get_task

logger = logging.getLogger(__name__)

SLOT_KEY_PREFIX = "scheduler:slot"
MUTEX_KEY_PREFIX = "scheduler:mutex"


def slot_key(task: ScheduledTask, slot: datetime) -> str:
    return f"{SLOT_KEY_PREFIX}:{task.name}:{slot.isoformat()}"


def mutex_key(task: ScheduledTask) -> str:
    return f"{MUTEX_KEY_PREFIX}:{task.name}"


def _mutex_timeout(task: ScheduledTask) -> int:
    if task.without_overlapping is not None:
        return int(task.without_overlapping.total_seconds())
    return get_settings().job_timeout


def run_scheduled_task(name: str, redis: Optional[Redis] = None):
    """
    Run one scheduled task under its mutex.

    Returns the task's result, or None when another run holds the mutex.
    Task exceptions propagate so the job (and the CLI) report failure.
    """
    task = get_task(name)
    redis = redis or get_redis_connection()
    lock = redis.lock(mutex_key(task), timeout=_mutex_timeout(task))
    if not lock.acquire(blocking=False):
        logger.warning(f"Skipping {name}: previous run still in progress")
        return None

    logger.info(f"Running scheduled task {name}")
    try:
        return task.func()
    finally:
        try:
            lock.release()
        except LockError as e:
            # Mutex expired mid-run; another run may already own it
            logger.warning(f"Mutex for {name} was lost before release: {e}")


class Scheduler:
    """Enqueues scheduled tasks on the scheduled queue when their slots come due."""

    def __init__(
        self,
        tasks: Iterable[ScheduledTask],
        queue,
        redis: Redis,
        node_id: Optional[str] = None,
        poll_interval: float = 30.0,
        tz=timezone.utc,
    ):
        self.tasks: List[ScheduledTask] = list(tasks)
        self.queue = queue
        self.redis = redis
        self.node_id = node_id or f"{socket.gethostname()}:{os.getpid()}"
        self.poll_interval = poll_interval
        self.tz = tz
        self._last_checked: Optional[datetime] = None
        self._stop = threading.Event()
        self._previous_handlers = {}

    @classmethod
    def from_settings(cls, tasks: Optional[Iterable[ScheduledTask]] = None) -> "Scheduler":
        settings = get_settings()
        return cls(
            tasks=SCHEDULE if tasks is None else tasks,
            queue=get_queue(SCHEDULED_QUEUE),
            redis=get_redis_connection(),
            poll_interval=settings.scheduler_poll_interval,
            tz=ZoneInfo(settings.scheduler_timezone),
        )

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def due_slot(self, task: ScheduledTask, since: datetime, now: datetime) -> Optional[datetime]:
        """Latest slot of ``task`` in (since, now], if any."""
        slot = task.cadence.last_run_at_or_before(now)
        return slot if slot > since else None

    def claim(self, task: ScheduledTask, slot: datetime) -> bool:
        if not task.on_one_server:
            return True
        ttl = max(int(task.cadence.every.total_seconds()), 60)
        return bool(self.redis.set(slot_key(task, slot), self.node_id, nx=True, ex=ttl))

    def run_pending(self, now: Optional[datetime] = None) -> List[str]:
        """
        Enqueue every task whose slot fell due since the previous tick.

        Returns the names of the tasks this node enqueued.
        """
        now = now or self.now()
        since = self._last_checked or now - timedelta(seconds=self.poll_interval)
        self._last_checked = now

        enqueued = []
        for task in self.tasks:
            slot = self.due_slot(task, since, now)
            if slot is None:
                continue
            if not self.claim(task, slot):
                logger.debug(f"Slot {slot.isoformat()} for {task.name} claimed by another node")
                continue
            job = self.queue.enqueue(run_scheduled_task, task.name)
            logger.info(f"Enqueued {task.name} for slot {slot.isoformat()}, job {job.id}")
            enqueued.append(task.name)
        return enqueued

    def start(self) -> None:
        """Run the scheduling loop until shutdown() or SIGTERM/SIGINT."""
        self._install_signal_handlers()
        self._stop.clear()
        self._last_checked = self.now()
        logger.info(
            f"Scheduler {self.node_id} started with {len(self.tasks)} tasks, "
            f"polling every {self.poll_interval}s"
        )
        try:
            while not self._stop.wait(self.poll_interval):
                try:
                    self.run_pending()
                except Exception as e:
                    logger.error(f"Scheduler tick failed: {e}", exc_info=True)
        finally:
            self._restore_signal_handlers()
            logger.info(f"Scheduler {self.node_id} stopped")

    def shutdown(self) -> None:
        self._stop.set()

    def _handle_signal(self, signum, frame) -> None:
        logger.info(f"Received signal {signum}, shutting down scheduler")
        self.shutdown()

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in (signal.SIGTERM, signal.SIGINT):
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
