"""Scheduler implementation for the URL shortener.

This module provides a scheduler service that runs the expired mapping
cleanup periodically using APScheduler. The application only starts it
when EXPIRY_CLEANUP_ENABLED is set.
"""

import logging
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from shorturl.core.config import Settings, settings as default_settings
from shorturl.db.base import Database
from shorturl.models.url import utcnow
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.cleanup import CleanupService

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "cleanup_expired_urls"
CLEANUP_JOB_NAME = "Cleanup Expired URLs"


async def cleanup_expired_urls_job(database: Database) -> Dict[str, Any]:
    """
    Job to delete expired mappings.

    Opens its own session on the given store client, so it never shares
    state with in-flight requests. Failures are logged and reported in the
    returned dict; the scheduler keeps running.
    """
    logger.info("Expired mapping sweep started")
    try:
        async with database.session() as session:
            cleanup_service = CleanupService(URLRepository())
            result = await cleanup_service.cleanup_expired_urls(db=session)
    except Exception as e:
        logger.error(f"Expired mapping sweep failed: {e}", exc_info=True)
        return {
            "status": "error",
            "error": str(e),
            "timestamp": utcnow().isoformat()
        }

    logger.info(f"Expired mapping sweep removed {result['deleted']} mappings")
    return result


class SchedulerService:
    """
    Owns the AsyncIOScheduler that runs the expired mapping sweep.

    A thin wrapper around APScheduler's AsyncIOScheduler that knows how to
    register the cleanup job for one Database.
    """

    def __init__(self, database: Database, config: Optional[Settings] = None):
        """Nothing is scheduled until start() is called."""
        self.database = database
        self.config = config or default_settings
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.is_running = False
        self.jobs: List[Dict[str, Any]] = []

    def initialize(self) -> None:
        """
        Create the scheduler without starting it.

        Jobs live in APScheduler's in-memory job store; they are registered
        again on every start.
        """
        if self.scheduler:
            logger.warning("Cleanup scheduler exists, not creating another")
            return

        self.scheduler = AsyncIOScheduler(
            job_defaults={
                'coalesce': self.config.SCHEDULER_JOB_COALESCE,
                'max_instances': self.config.SCHEDULER_JOB_MAX_INSTANCES,
                'misfire_grace_time': self.config.SCHEDULER_MISFIRE_GRACE_TIME
            },
            timezone='UTC',
        )
        logger.info("Scheduler initialized")

    def start(self) -> None:
        """
        Start the scheduler and register the cleanup job.

        Must be called from within a running event loop.
        """
        if not self.scheduler:
            self.initialize()

        if self.is_running:
            logger.warning("Cleanup scheduler is running already")
            return

        try:
            self.scheduler.add_job(
                cleanup_expired_urls_job,
                trigger=IntervalTrigger(
                    hours=self.config.CLEANUP_INTERVAL_HOURS,
                    timezone='UTC'
                ),
                args=[self.database],
                id=CLEANUP_JOB_ID,
                name=CLEANUP_JOB_NAME,
                replace_existing=True
            )
            self.jobs = [{
                'id': CLEANUP_JOB_ID,
                'name': CLEANUP_JOB_NAME,
                'interval': f'{self.config.CLEANUP_INTERVAL_HOURS} hours',
                'function': cleanup_expired_urls_job.__name__
            }]

            if self.config.CLEANUP_START_ON_STARTUP:
                logger.info("Queueing an immediate sweep")
                self.scheduler.add_job(
                    cleanup_expired_urls_job,
                    args=[self.database],
                    id='cleanup_startup',
                    name='Startup Cleanup',
                    replace_existing=True
                )

            self.scheduler.start()
            self.is_running = True
            logger.info(f"Cleanup scheduler running every {self.config.CLEANUP_INTERVAL_HOURS}h")
        except Exception as e:
            logger.error(f"Cleanup scheduler failed to start: {e}", exc_info=True)
            self.is_running = False
            raise

    def shutdown(self) -> None:
        """Stop the scheduler, waiting for a running job to finish."""
        if not self.scheduler or not self.is_running:
            logger.debug("Cleanup scheduler not running")
            return

        self.scheduler.shutdown(wait=True)
        self.is_running = False
        self.scheduler = None
        logger.info("Cleanup scheduler stopped")

    def get_status(self) -> Dict[str, Any]:
        """
        Report whether the sweep is scheduled and when it runs next.

        Returns:
            Dict with the running flag, the registered jobs and their next run times
        """
        job_details = []
        if self.scheduler and self.is_running:
            for job in self.scheduler.get_jobs():
                job_details.append({
                    'job_id': job.id,
                    'name': job.name,
                    'next_run_time': job.next_run_time.isoformat() if job.next_run_time else None
                })

        return {
            'running': self.is_running,
            'jobs': self.jobs,
            'scheduler_jobs_status': job_details
        }
