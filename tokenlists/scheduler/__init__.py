"""Refresh scheduling."""

from .channel import NotificationChannel
from .refresh_worker import REFRESH_JOB_ID, RefreshWorker

__all__ = ["NotificationChannel", "REFRESH_JOB_ID", "RefreshWorker"]
