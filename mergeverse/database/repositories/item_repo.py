from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from mergeverse.database import models
from mergeverse.database.models import Level
from mergeverse.utils.exceptions import insufficient


class ItemRepository:
    """Стеки предметов пользователя: (user, gift, level, tradeable) -> quantity."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_item(self, item_id: int, user_id: int | None = None, for_update: bool = False) -> models.Item | None:
        query = select(models.Item).where(models.Item.id == item_id)
        if user_id is not None:
            query = query.where(models.Item.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_stack(self, user_id: int, gift_id: int, level: Level, is_tradeable: bool,
                        for_update: bool = False) -> models.Item | None:
        query = select(models.Item).where(
            models.Item.user_id == user_id,
            models.Item.gift_id == gift_id,
            models.Item.level == level,
            models.Item.is_tradeable == is_tradeable,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def add_item(self, user_id: int, gift_id: int, level: Level, is_tradeable: bool,
                       quantity: int = 1) -> models.Item:
        """Upsert: увеличивает существующий стек или создает новый."""
        item = await self.get_stack(user_id, gift_id, level, is_tradeable, for_update=True)
        if item:
            item.quantity += quantity
        else:
            item = models.Item(
                user_id=user_id,
                gift_id=gift_id,
                level=level,
                is_tradeable=is_tradeable,
                quantity=quantity,
            )
            self.session.add(item)
        await self.session.flush()
        return item

    async def take(self, item: models.Item, count: int = 1):
        """Decrement, deleting the row once it runs out."""
        if item.quantity < count:
            raise insufficient(f"Not enough items: have {item.quantity}, need {count}")
        if item.quantity == count:
            await self.session.delete(item)
        else:
            item.quantity -= count
        await self.session.flush()

    async def find_for_consumption(self, user_id: int, gift_id: int, level: Level) -> models.Item | None:
        # сначала непередаваемый стек, торгуемые жалко
        result = await self.session.execute(
            select(models.Item)
            .where(
                models.Item.user_id == user_id,
                models.Item.gift_id == gift_id,
                models.Item.level == level,
            )
            .order_by(models.Item.is_tradeable.asc())
            .limit(1)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_user_items(self, user_id: int, level: Level | None = None,
                             gift_id: int | None = None, for_update: bool = False) -> list[models.Item]:
        query = select(models.Item).where(models.Item.user_id == user_id)
        if level is not None:
            query = query.where(models.Item.level == level)
        if gift_id is not None:
            query = query.where(models.Item.gift_id == gift_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query.order_by(models.Item.gift_id, models.Item.level))
        return list(result.scalars().all())

    async def get_all_items(self, user_id: int | None = None) -> list[models.Item]:
        query = select(models.Item)
        if user_id is not None:
            query = query.where(models.Item.user_id == user_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_all(self, user_id: int | None = None) -> int:
        query = delete(models.Item)
        if user_id is not None:
            query = query.where(models.Item.user_id == user_id)
        result = await self.session.execute(query)
        return result.rowcount or 0
