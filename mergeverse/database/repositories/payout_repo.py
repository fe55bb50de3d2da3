from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database import models


class PayoutRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> models.Payout:
        payout = models.Payout(**kwargs)
        self.session.add(payout)
        await self.session.flush()
        return payout

    async def get(self, payout_id: int, for_update: bool = False) -> models.Payout | None:
        query = select(models.Payout).where(models.Payout.id == payout_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_user_payouts(self, user_id: int) -> list[models.Payout]:
        result = await self.session.execute(
            select(models.Payout)
            .where(models.Payout.user_id == user_id)
            .order_by(models.Payout.created_at.desc(), models.Payout.id.desc())
        )
        return list(result.scalars().all())
