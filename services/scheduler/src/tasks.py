"""
The periodic task table.

Each task names a job entrypoint, when it runs, and how it is guarded.
``on_one_server`` means one node claims each run slot. Every run also holds
a per-task mutex and is skipped while a previous run still holds it;
``without_overlapping`` sets how long that mutex may be held before it
expires (the job timeout otherwise).
"""
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Dict, List, Optional

from services.analytics.src.jobs import update_clause_analytics
from services.lifecycle.src.jobs import close_expired_bills, open_scheduled_bills


@dataclass(frozen=True)
class Cadence:
    """
    Fixed-interval cadence anchored at midnight.

    ``at`` shifts the anchor, so ``Cadence(timedelta(days=1), time(0, 1))``
    is "daily at 00:01" and ``Cadence(timedelta(minutes=5))`` runs at
    :00, :05, :10 ...
    """
    every: timedelta
    at: time = time(0, 0)

    def __post_init__(self):
        if self.every <= timedelta(0):
            raise ValueError("Cadence interval must be positive")

    @classmethod
    def daily_at(cls, hour: int, minute: int = 0) -> "Cadence":
        return cls(every=timedelta(days=1), at=time(hour, minute))

    @classmethod
    def every_minutes(cls, minutes: int) -> "Cadence":
        return cls(every=timedelta(minutes=minutes))

    def _anchor(self, moment: datetime) -> datetime:
        anchor = moment.replace(
            hour=self.at.hour, minute=self.at.minute, second=0, microsecond=0
        )
        if anchor > moment:
            anchor -= timedelta(days=1)
        return anchor

    def last_run_at_or_before(self, moment: datetime) -> datetime:
        anchor = self._anchor(moment)
        steps = (moment - anchor) // self.every
        return anchor + steps * self.every

    def next_run_after(self, moment: datetime) -> datetime:
        return self.last_run_at_or_before(moment) + self.every


@dataclass(frozen=True)
class ScheduledTask:
    name: str
    func: Callable[[], object]
    cadence: Cadence
    description: str = ""
    on_one_server: bool = True
    without_overlapping: Optional[timedelta] = None


SCHEDULE: List[ScheduledTask] = [
    ScheduledTask(
        name="bills:close-expired",
        func=close_expired_bills,
        cadence=Cadence.daily_at(0, 0),
        description="Close bills whose participation window has ended",
    ),
    ScheduledTask(
        name="bills:open-scheduled",
        func=open_scheduled_bills,
        cadence=Cadence.daily_at(0, 1),
        description="Open gazetted bills whose participation window has started",
    ),
    ScheduledTask(
        name="analytics:update-clause-analytics",
        func=update_clause_analytics,
        cadence=Cadence.every_minutes(5),
        description="Recompute clause analytics for bills open for participation",
        without_overlapping=timedelta(minutes=5),
    ),
]

_TASKS_BY_NAME: Dict[str, ScheduledTask] = {task.name: task for task in SCHEDULE}


def get_task(name: str) -> ScheduledTask:
    try:
        return _TASKS_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown scheduled task: {name}") from None
