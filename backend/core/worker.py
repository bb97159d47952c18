"""
Background worker using APScheduler.
Runs the periodic SLA sweep over open projects.
"""
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from marketplace.quote_match import SLA_TARGET_QUOTES

from .config import settings
from .db import list_open_projects_past_deadline, utc_now

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[BackgroundScheduler] = None


def sweep_sla_breaches(now: Optional[datetime] = None) -> list:
    """
    Find open projects past their 24h deadline with too few quotes.

    Called periodically by the scheduler. Returns the breached project IDs.
    """
    now = now or utc_now()
    breached = []

    for project in list_open_projects_past_deadline(now):
        quote_count = project.get("quote_count") or 0
        if quote_count >= SLA_TARGET_QUOTES:
            continue
        breached.append(project["id"])
        logger.warning(
            f"SLA breach: project {project['id']} has {quote_count}/{SLA_TARGET_QUOTES} quotes "
            f"(deadline {project['sla_deadline']})"
        )

    if breached:
        logger.info(f"SLA sweep found {len(breached)} breached project(s)")
    return breached


def start_scheduler():
    """Start the background scheduler."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    scheduler = BackgroundScheduler()

    scheduler.add_job(
        sweep_sla_breaches,
        IntervalTrigger(minutes=settings.SLA_SWEEP_MINUTES),
        id="sla_sweep",
        name="Report projects past their quote SLA",
        replace_existing=True
    )

    scheduler.start()
    logger.info("Background scheduler started")


def stop_scheduler():
    """Stop the background scheduler."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Background scheduler stopped")


def get_scheduler_status() -> dict:
    """Get scheduler status."""
    if scheduler is None:
        return {"running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {"running": scheduler.running, "jobs": jobs}


def init_worker():
    """Initialize the worker (call from FastAPI startup)."""
    if not settings.ENABLE_WORKER:
        logger.info("Background worker disabled (ENABLE_WORKER=false)")
        return
    start_scheduler()
