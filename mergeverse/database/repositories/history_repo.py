from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database import models
from mergeverse.database.models import Level


class HistoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def mark(self, user_id: int, gift_id: int, level: Level):
        result = await self.session.execute(
            select(models.History.id).where(
                models.History.user_id == user_id,
                models.History.gift_id == gift_id,
                models.History.level == level,
            )
        )
        if result.scalar_one_or_none() is None:
            self.session.add(models.History(user_id=user_id, gift_id=gift_id, level=level))
            await self.session.flush()

    async def get_user_history(self, user_id: int) -> set[tuple[int, Level]]:
        result = await self.session.execute(
            select(models.History.gift_id, models.History.level).where(models.History.user_id == user_id)
        )
        return {(gift_id, level) for gift_id, level in result.all()}
