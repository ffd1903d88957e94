"""Scheduler service: periodic task table, single-flight scheduling and CLI."""

from .scheduler import Scheduler, run_scheduled_task
from .tasks import SCHEDULE, Cadence, ScheduledTask, get_task

__all__ = ["SCHEDULE", "Cadence", "ScheduledTask", "Scheduler", "get_task", "run_scheduled_task"]
