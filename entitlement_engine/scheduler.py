from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from entitlement_engine.config import settings
from entitlement_engine.services.cache_service import UsageCache
import logging

scheduler = AsyncIOScheduler()

logger = logging.getLogger(__name__)

USAGE_CACHE_SWEEP_JOB_ID = "usage_cache_sweep"


def sweep_usage_cache(cache: UsageCache) -> int:
    removed = cache.sweep()
    if removed:
        logger.info(f"[Scheduler] Swept {removed} expired usage counters, {len(cache)} remaining")
    return removed


def schedule_usage_cache_sweep(
    cache: UsageCache,
    interval_seconds: int | None = None,
    target: AsyncIOScheduler | None = None,
):
    target = target or scheduler
    interval_seconds = interval_seconds or settings.usage_cache_sweep_interval_seconds
    job = target.add_job(
        sweep_usage_cache,
        trigger=IntervalTrigger(seconds=interval_seconds),
        args=[cache],
        id=USAGE_CACHE_SWEEP_JOB_ID,
        replace_existing=True
    )
    logger.info(f"[Scheduler] Usage cache sweep scheduled every {interval_seconds}s")
    return job
