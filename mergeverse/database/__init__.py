import config

from mergeverse.database.pg_pool import DataBase
from mergeverse.database.redis_pool import RedisPool

db = DataBase(
    f"postgresql+asyncpg://{config.POSTGRES_USER}:{config.POSTGRES_PASSWORD}@{config.POSTGRES_HOST}:{config.POSTGRES_PORT}/{config.POSTGRES_DB}",
    pool_size=30,
    max_overflow=20,
    pool_timeout=30,
    pool_recycle=1800,
    connect_args={"server_settings": {"timezone": config.TIMEZONE}},
)
redis_pool = RedisPool(url=f'redis://{config.REDIS_HOST}:{config.REDIS_PORT}/{config.REDIS_DB}')
