from decimal import Decimal
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from mergeverse.database import models
from mergeverse.utils.exceptions import insufficient, not_found


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, **kwargs) -> models.User:
        user = models.User(**kwargs)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_user(self, user_id: int, for_update: bool = False) -> models.User | None:
        query = select(models.User).where(models.User.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_users(self, user_ids) -> list[models.User]:
        result = await self.session.execute(select(models.User).where(models.User.user_id.in_(list(user_ids))))
        return list(result.scalars().all())

    async def charge(self, user_id: int, amount: Decimal) -> Decimal:
        """
        Списывает ``amount`` одним условным UPDATE.
        Строка не вернулась - баланса не хватило, ничего не списано.
        """
        result = await self.session.execute(
            update(models.User)
            .where(models.User.user_id == user_id, models.User.balance >= amount)
            .values(balance=models.User.balance - amount)
            .returning(models.User.balance)
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise insufficient("Insufficient balance")
        return balance

    async def credit(self, user_id: int, amount: Decimal) -> Decimal:
        result = await self.session.execute(
            update(models.User)
            .where(models.User.user_id == user_id)
            .values(balance=models.User.balance + amount)
            .returning(models.User.balance)
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise not_found(f"User {user_id} not found")
        return balance

    async def reset_streaks(self, inactive_since: datetime) -> int:
        result = await self.session.execute(
            update(models.User)
            .where(
                models.User.streak > 0,
                or_(models.User.active_at.is_(None), models.User.active_at < inactive_since),
            )
            .values(streak=0)
        )
        return result.rowcount or 0
