from unittest.mock import MagicMock

import pytest

from betboard.numbers import Variant
from betboard.scheduler.slot_jobs import (
    LIVE_PREVIEW_JOB_ID,
    MISFIRE_GRACE_SECONDS,
    PROMOTION_JOB_ID,
    SlotScheduler,
    run_live_preview_job,
    run_promotion_job,
)
from betboard.services.dashboard_service import DashboardMonitor


@pytest.fixture
def monitor(bet_service, promotion_service):
    return DashboardMonitor(bet_service, promotion_service, variants=[Variant.JODI])


def test_scheduler_registers_jobs_and_stops(monitor):
    scheduler = SlotScheduler(monitor, interval_seconds=30)
    scheduler.start()
    try:
        assert scheduler.running
        job_ids = {job.id for job in scheduler._scheduler.get_jobs()}
        assert job_ids == {LIVE_PREVIEW_JOB_ID, PROMOTION_JOB_ID}
        promotion = scheduler._scheduler.get_job(PROMOTION_JOB_ID)
        assert promotion.misfire_grace_time == MISFIRE_GRACE_SECONDS
    finally:
        scheduler.stop()

    assert not scheduler.running


def test_stopped_scheduler_drops_late_previews(monitor):
    scheduler = SlotScheduler(monitor)
    scheduler.start()
    scheduler.stop()

    monitor.refresh_live(Variant.JODI)

    assert monitor.snapshot(Variant.JODI).current is None


def test_jobs_log_and_swallow_failures(caplog):
    monitor = MagicMock()
    monitor.refresh_all_live.side_effect = RuntimeError("boom")
    monitor.run_promotion_tick.side_effect = RuntimeError("boom")

    run_live_preview_job(monitor)
    run_promotion_job(monitor)

    assert "Live preview job failed" in caplog.text
    assert "Promotion job failed" in caplog.text


def test_live_job_refreshes_every_variant(monitor, bet_service):
    bet_service.submit_entry("05", 10, "jodi")

    run_live_preview_job(monitor)

    assert monitor.snapshot(Variant.JODI).current.entry_count == 1
