from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database import models
from mergeverse.database.models import PackType


class CompensationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, user_id: int, pack_type: PackType, amount: int) -> models.Compensation:
        result = await self.session.execute(
            select(models.Compensation)
            .where(models.Compensation.user_id == user_id, models.Compensation.pack_type == pack_type)
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        if row:
            row.amount += amount
        else:
            row = models.Compensation(user_id=user_id, pack_type=pack_type, amount=amount)
            self.session.add(row)
        await self.session.flush()
        return row

    async def get(self, compensation_id: int, user_id: int, for_update: bool = False) -> models.Compensation | None:
        query = select(models.Compensation).where(
            models.Compensation.id == compensation_id,
            models.Compensation.user_id == user_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_user_compensations(self, user_id: int) -> list[models.Compensation]:
        result = await self.session.execute(
            select(models.Compensation)
            .where(models.Compensation.user_id == user_id, models.Compensation.amount > 0)
            .order_by(models.Compensation.id)
        )
        return list(result.scalars().all())

    async def take_one(self, row: models.Compensation):
        if row.amount <= 1:
            await self.session.delete(row)
        else:
            row.amount -= 1
        await self.session.flush()
