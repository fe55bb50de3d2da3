from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from mergeverse.database import models
from mergeverse.database.models import ReferralSettingsName, ValueType


class CatalogRepository:
    """Справочные таблицы: подарки, цены, награды за коллекцию, реферальные настройки."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_gifts(self) -> int:
        result = await self.session.execute(select(func.count(models.Gift.id)))
        return result.scalar() or 0

    async def get_gifts(self) -> list[models.Gift]:
        result = await self.session.execute(select(models.Gift).order_by(models.Gift.id))
        return list(result.scalars().all())

    async def get_prices(self) -> list[models.Price]:
        result = await self.session.execute(select(models.Price))
        return list(result.scalars().all())

    async def get_vertical_prices(self) -> list[models.VerticalPrice]:
        result = await self.session.execute(select(models.VerticalPrice))
        return list(result.scalars().all())

    async def get_horizontal_prices(self) -> list[models.HorizontalPrice]:
        result = await self.session.execute(select(models.HorizontalPrice))
        return list(result.scalars().all())

    async def get_referral_settings(self) -> list[models.ReferralSettings]:
        result = await self.session.execute(select(models.ReferralSettings))
        return list(result.scalars().all())

    async def set_referral_setting(self, name: ReferralSettingsName, type: ValueType, value: Decimal):
        result = await self.session.execute(
            select(models.ReferralSettings).where(models.ReferralSettings.name == name)
        )
        row = result.scalar_one_or_none()
        if row:
            row.type = type
            row.value = value
        else:
            row = models.ReferralSettings(name=name, type=type, value=value)
            self.session.add(row)
        await self.session.flush()
        return row
