from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database.models.settings import Settings


class SettingsRepository:
    """Системные настройки key/value (GIVEAWAY_STEPS, COLLECTION_VISIBLE)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str, default=None) -> str | None:
        value = await self.session.scalar(select(Settings.value).where(Settings.key == key))
        return default if value is None else value

    async def get_all(self) -> dict[str, str | None]:
        rows = await self.session.execute(select(Settings.key, Settings.value))
        return dict(rows.all())

    async def set(self, key: str, value: str) -> Settings:
        row = await self.session.scalar(select(Settings).where(Settings.key == key).with_for_update())
        if row is None:
            row = Settings(key=key, value=value)
            self.session.add(row)
        else:
            row.value = value
        await self.session.flush()
        return row
