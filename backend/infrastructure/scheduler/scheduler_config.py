"""
APScheduler configuration and management.

Runs the periodic sweep that drops expired sessions nobody reads again.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from infrastructure.session.in_memory_session_store import InMemorySessionStore

logger = logging.getLogger(__name__)

SESSION_CLEANUP_JOB_ID = "session_cleanup"


class SchedulerManager:
    """
    Manages APScheduler lifecycle and job registration.

    Jobs are coroutines executed on the application event loop, so they
    share the session store with request handlers without extra locking.
    """

    def __init__(self) -> None:
        """Initialize scheduler manager."""
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._sessions: Optional[InMemorySessionStore] = None

    def initialize(self, sessions: InMemorySessionStore, interval_seconds: int = 300) -> None:
        """
        Initialize and configure scheduler with the session sweep.

        Args:
            sessions: Store whose expired entries are removed
            interval_seconds: Seconds between sweeps
        """
        if self.scheduler is not None:
            logger.warning("Scheduler already initialized")
            return

        self._sessions = sessions
        self.scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
            },
        )
        self.scheduler.add_job(
            self.run_session_cleanup,
            trigger=IntervalTrigger(seconds=interval_seconds, timezone="UTC"),
            id=SESSION_CLEANUP_JOB_ID,
            name="Expired session cleanup",
            replace_existing=True,
        )
        logger.info(f"Session cleanup job registered every {interval_seconds}s")

    async def run_session_cleanup(self) -> int:
        """Remove expired sessions now; returns how many were dropped."""
        if self._sessions is None:
            raise RuntimeError("Scheduler not initialized")

        removed = self._sessions.cleanup_expired()
        if removed:
            logger.info(f"Session cleanup removed {removed} expired sessions")
        return removed

    def start(self) -> None:
        """Start scheduler (begin executing jobs)."""
        if self.scheduler is None:
            raise RuntimeError("Scheduler not initialized")

        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown scheduler.

        Args:
            wait: If True, wait for running jobs to complete
        """
        if self.scheduler is None or not self.scheduler.running:
            return

        self.scheduler.shutdown(wait=wait)
        logger.info(f"Scheduler shutdown (wait={wait})")

    def get_jobs(self) -> list[dict[str, str]]:
        """List scheduled jobs (id, name, trigger)."""
        if self.scheduler is None:
            return []

        return [
            {"id": job.id, "name": job.name, "trigger": str(job.trigger)}
            for job in self.scheduler.get_jobs()
        ]
