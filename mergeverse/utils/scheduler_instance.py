import config

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.redis import RedisJobStore

# задачи хранятся в отдельной redis db, чтобы не пересекаться с FSM и локами
jobstore = RedisJobStore(
    jobs_key='mergeverse.jobs',
    run_times_key='mergeverse.run_times',
    host=config.REDIS_HOST,
    port=config.REDIS_PORT,
    db=config.REDIS_JOBSTORE_DB,
    socket_timeout=30,
)

scheduler = AsyncIOScheduler(
    jobstores={'default': jobstore},
    timezone=config.TIMEZONE,
    job_defaults={
        # задачи идемпотентны, пропущенные запуски сливаем в один
        'misfire_grace_time': 120,
        'coalesce': True,
    },
)
