# @role: Background scheduler that drives the periodic price tick
# @used_by: main.py
# @filter_type: system
# @tags: scheduler, interval, background
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR, JobExecutionEvent

from config.settings import load_simulation_config
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()

PRICE_TICK_JOB_ID = "price_tick"

def safe_job_runner(func, job_id: str):
    """Run `func` with structured logging and exception capture."""
    try:
        logger.debug("▶ Job %s starting", job_id)
        func()
        logger.debug("✔ Job %s completed successfully", job_id)
    except Exception:
        logger.exception("✖ Job %s failed with exception", job_id)

def job_listener(event: JobExecutionEvent):
    """Catch any errors after each job run."""
    if event.exception:
        logger.error("❌ Job %s raised an exception: %s", event.job_id, event.exception)

def build_scheduler(session, interval_seconds: Optional[float] = None) -> BackgroundScheduler:
    """
    One interval job calling session.tick(). max_instances=1 plus coalesce
    means a slow tick delays the next one instead of overlapping it.
    """
    if interval_seconds is None:
        interval_seconds = load_simulation_config()["tick_interval_seconds"]

    scheduler = BackgroundScheduler()
    scheduler.add_listener(job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    scheduler.add_job(
        func=lambda: safe_job_runner(session.tick, PRICE_TICK_JOB_ID),
        trigger=IntervalTrigger(seconds=interval_seconds),
        id=PRICE_TICK_JOB_ID,
        name="Simulate price tick",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    return scheduler

def start(scheduler: BackgroundScheduler):
    if not scheduler.running:
        scheduler.start()
        logger.info("✅ APScheduler started")

def shutdown(scheduler: BackgroundScheduler):
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("🛑 APScheduler shut down")
