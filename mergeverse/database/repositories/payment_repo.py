from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from mergeverse.database import models


class PaymentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> models.Payment:
        payment = models.Payment(**kwargs)
        self.session.add(payment)
        await self.session.flush()
        return payment

    async def get(self, payment_id: int, for_update: bool = False) -> models.Payment | None:
        query = select(models.Payment).where(models.Payment.id == payment_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
