"""SchedulerService -- APScheduler AsyncIOScheduler 래퍼 (주기적 캐시 rebuild)."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from botrecap.config import AppConfig
from botrecap.scheduler.jobs import run_rebuild_job

logger = logging.getLogger(__name__)


class SchedulerService:
    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._scheduler: AsyncIOScheduler | None = None

    def start(self) -> None:
        if not self._config.scheduler_enabled:
            logger.info("Scheduler disabled in config")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            run_rebuild_job,
            IntervalTrigger(hours=self._config.rebuild_interval_hours),
            id="rebuild",
            args=[self._config],
            # 한 번에 하나의 빌드만 (캐시 writer는 하나)
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Scheduler started (every %sh)", self._config.rebuild_interval_hours)

    def shutdown(self) -> None:
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

    def status(self) -> dict:
        if not self._config.scheduler_enabled:
            return {"state": "disabled", "jobs": []}
        if self._scheduler is None:
            return {"state": "stopped", "jobs": []}
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = job.next_run_time
            jobs.append({"id": job.id, "next_run": next_run.isoformat() if next_run else None})
        return {"state": "running", "jobs": jobs}
