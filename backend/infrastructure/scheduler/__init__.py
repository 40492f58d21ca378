"""
Scheduler infrastructure for background jobs.
"""

from .scheduler_config import SchedulerManager

__all__ = ["SchedulerManager"]
