"""
Периодические задачи. Каждая берет короткий Redis-лок, чтобы две копии
процесса не подводили итоги одновременно, и зовет тот же метод сервиса, что и HTTP.
"""
import config

from typing import Awaitable, Callable

from mergeverse.database import redis_pool
from mergeverse.logger import logger


async def run_locked(name: str, job: Callable[[], Awaitable], acquire_lock=None, ttl: int = config.SETTLE_LOCK_TTL):
    acquire_lock = acquire_lock or redis_pool.acquire_lock
    if not await acquire_lock(f'job:{name}', ttl):
        logger.info(f"Job {name} is already running elsewhere, skipping")
        return None
    try:
        result = await job()
    except Exception as e:
        logger.exception(f"Job {name} failed: {e}")
        return None
    if result:
        logger.info(f"Job {name}: {result}")
    return result


def _services():
    from loader import services
    return services


async def settle_expired_auctions():
    return await run_locked('settle_expired_auctions', _services().auctions.settle_expired)


async def activate_pending_giveaways():
    return await run_locked('activate_pending_giveaways', _services().giveaways.activate_pending)


async def finish_expired_giveaways():
    return await run_locked('finish_expired_giveaways', _services().giveaways.finish_expired)


async def create_monthly_giveaways():
    return await run_locked('create_monthly_giveaways', _services().giveaways.create_monthly)


async def reset_streaks():
    return await run_locked('reset_streaks', _services().packs.reset_streaks)
