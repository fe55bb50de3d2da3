import config

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from mergeverse.database.models.base import Base


class DataBase:
    def __init__(self, database_url: str, **engine_options):
        self.engine = create_async_engine(
            database_url,
            echo=True if config.PG_DEBUG_MODE else False,
            **engine_options
            )
        self.async_session = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.async_session() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Unit of work: commits on exit, rolls back if anything raised inside."""
        async with self.async_session() as session:
            async with session.begin():
                yield session

    async def check_and_create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()
