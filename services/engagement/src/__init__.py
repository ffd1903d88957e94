"""Engagement service: citizen messages to legislators and citizen submissions."""

from .engagement import EngagementError, EngagementService, SubmissionService
from .engagement_repository import EngagementRepository

__all__ = ["EngagementError", "EngagementRepository", "EngagementService", "SubmissionService"]
