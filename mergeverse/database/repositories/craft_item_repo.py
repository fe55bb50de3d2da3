from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database import models


class CraftItemRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, craft_item_id: int, user_id: int, for_update: bool = False) -> models.CraftItem | None:
        query = select(models.CraftItem).where(
            models.CraftItem.id == craft_item_id,
            models.CraftItem.user_id == user_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def at_position(self, user_id: int, x: int, y: int) -> models.CraftItem | None:
        result = await self.session.execute(
            select(models.CraftItem).where(
                models.CraftItem.user_id == user_id,
                models.CraftItem.position_x == x,
                models.CraftItem.position_y == y,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, **kwargs) -> models.CraftItem:
        craft_item = models.CraftItem(**kwargs)
        self.session.add(craft_item)
        await self.session.flush()
        return craft_item

    async def delete(self, craft_item: models.CraftItem):
        await self.session.delete(craft_item)
        await self.session.flush()

    async def get_table(self, user_id: int) -> list[models.CraftItem]:
        result = await self.session.execute(
            select(models.CraftItem)
            .where(models.CraftItem.user_id == user_id)
            .order_by(models.CraftItem.position_y, models.CraftItem.position_x)
        )
        return list(result.scalars().all())
