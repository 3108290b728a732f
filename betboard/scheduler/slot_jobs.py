"""
Two recurring jobs keep the dashboard fresh:

- live preview: every SCHEDULER_INTERVAL_SECONDS, recompute the current slot
  window and its preview for each watched variant.
- promotion: once a minute; the first run in each new slot settles the slot
  that just closed (or every elapsed slot, after a skipped run) and refreshes
  the dashboard view.

Jobs run on a single worker thread and never overlap. The scheduler is owned
by whoever needs the data and is started and stopped explicitly.
"""
import logging

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler

from betboard.services.dashboard_service import DashboardMonitor

logger = logging.getLogger(__name__)

LIVE_PREVIEW_JOB_ID = "live_preview"
PROMOTION_JOB_ID = "slot_promotion"

# A late run still fires; the monitor catches up on any slot it skipped.
MISFIRE_GRACE_SECONDS = 5 * 60


def run_live_preview_job(monitor: DashboardMonitor) -> None:
    try:
        monitor.refresh_all_live()
    except Exception as e:
        logger.exception("Live preview job failed: %s", e)


def run_promotion_job(monitor: DashboardMonitor) -> None:
    try:
        results = monitor.run_promotion_tick()
    except Exception as e:
        logger.exception("Promotion job failed: %s", e)
        return
    for r in results:
        logger.info(
            "Promotion tick %s %s: %s promoted, %s already settled",
            r.date,
            r.variant.value,
            r.promoted,
            r.already_settled,
        )


class SlotScheduler:
    """Owns the background scheduler driving a DashboardMonitor."""

    def __init__(self, monitor: DashboardMonitor, interval_seconds: int = 60, timezone: str = "UTC") -> None:
        self._monitor = monitor
        self._interval_seconds = int(interval_seconds)
        self._scheduler = BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(max_workers=1)},
            job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": MISFIRE_GRACE_SECONDS},
            timezone=timezone,
        )

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        if self.running:
            return
        self._monitor.resume()
        self._scheduler.add_job(
            run_live_preview_job,
            "interval",
            seconds=self._interval_seconds,
            args=[self._monitor],
            id=LIVE_PREVIEW_JOB_ID,
            replace_existing=True,
        )
        # Fire early in every minute so the boundary minute is never skipped by drift.
        self._scheduler.add_job(
            run_promotion_job,
            "cron",
            minute="*",
            second=1,
            args=[self._monitor],
            id=PROMOTION_JOB_ID,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Slot scheduler started for %s; live preview every %ss",
            ", ".join(v.value for v in self._monitor.variants),
            self._interval_seconds,
        )

    def stop(self) -> None:
        self._monitor.stop()
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Slot scheduler stopped")
