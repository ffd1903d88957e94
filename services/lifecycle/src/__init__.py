"""Lifecycle service: time-driven bill status transitions and their events."""

from .bills_repository import BillsRepository
from .exceptions import PartialSweepError
from .lifecycle import BillLifecycleService

__all__ = ["BillLifecycleService", "BillsRepository", "PartialSweepError"]
