from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from mergeverse.logger import logger
from mergeverse.utils.scheduler_instance import scheduler
from mergeverse.jobs import (settle_expired_auctions, activate_pending_giveaways, finish_expired_giveaways,
                             create_monthly_giveaways, reset_streaks)


async def scheduler_start():
    try:

        scheduler.add_job(
            settle_expired_auctions,
            IntervalTrigger(minutes=1),
            id='settle_expired_auctions',
            replace_existing=True,
            max_instances=1
        )

        scheduler.add_job(
            activate_pending_giveaways,
            IntervalTrigger(minutes=5, jitter=30),
            id='activate_pending_giveaways',
            replace_existing=True,
            max_instances=1
        )

        scheduler.add_job(
            finish_expired_giveaways,
            IntervalTrigger(minutes=5, jitter=30),
            id='finish_expired_giveaways',
            replace_existing=True,
            max_instances=1
        )

        scheduler.add_job(
            create_monthly_giveaways,
            CronTrigger(day=2, hour=0, minute=1, timezone='UTC'),
            id='create_monthly_giveaways',
            replace_existing=True,
            max_instances=1
        )

        scheduler.add_job(
            reset_streaks,
            CronTrigger(hour=0, minute=0),
            id='reset_streaks',
            replace_existing=True
        )

        scheduler.start()
        logger.info("Scheduler started successfully with Redis backend")

    except Exception as e:
        logger.error(f"Failed to start scheduler: {str(e)}")
        raise
