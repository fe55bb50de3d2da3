from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from mergeverse.database import models
from mergeverse.database.models import GiveawayStatus, WinnerChoice, Rarity


class GiveawayRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> models.Giveaway:
        giveaway = models.Giveaway(**kwargs)
        self.session.add(giveaway)
        await self.session.flush()
        return giveaway

    async def get(self, giveaway_id: int, for_update: bool = False) -> models.Giveaway | None:
        query = select(models.Giveaway).where(models.Giveaway.id == giveaway_id)
        if for_update:
            query = query.with_for_update(of=models.Giveaway)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_giveaways(self, status: GiveawayStatus | None = None) -> list[models.Giveaway]:
        query = select(models.Giveaway)
        if status is not None:
            query = query.where(models.Giveaway.status == status)
        result = await self.session.execute(query.order_by(models.Giveaway.ends_at, models.Giveaway.id))
        return list(result.scalars().all())

    async def exists_for_period(self, gift_id: int, start_at: datetime) -> bool:
        result = await self.session.execute(
            select(models.Giveaway.id).where(
                models.Giveaway.gift_id == gift_id,
                models.Giveaway.start_at == start_at,
            ).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_due_for_activation(self, now: datetime) -> list[models.Giveaway]:
        result = await self.session.execute(
            select(models.Giveaway)
            .where(models.Giveaway.status == GiveawayStatus.PENDING, models.Giveaway.start_at <= now)
            .with_for_update(of=models.Giveaway)
        )
        return list(result.scalars().all())

    async def get_expired_ids(self, now: datetime) -> list[int]:
        result = await self.session.execute(
            select(models.Giveaway.id).where(
                models.Giveaway.status == GiveawayStatus.ACTIVE,
                models.Giveaway.ends_at <= now,
            )
        )
        return list(result.scalars().all())

    # entries

    async def get_entry(self, giveaway_id: int, user_id: int) -> models.Entry | None:
        result = await self.session.execute(
            select(models.Entry).where(models.Entry.giveaway_id == giveaway_id, models.Entry.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def add_entry(self, **kwargs) -> models.Entry:
        entry = models.Entry(**kwargs)
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_entries(self, giveaway_id: int) -> list[models.Entry]:
        result = await self.session.execute(
            select(models.Entry).where(models.Entry.giveaway_id == giveaway_id).order_by(models.Entry.id)
        )
        return list(result.scalars().all())

    async def count_entries(self, giveaway_id: int) -> int:
        result = await self.session.execute(
            select(func.count(models.Entry.id)).where(models.Entry.giveaway_id == giveaway_id)
        )
        return result.scalar() or 0

    async def get_user_entries(self, user_id: int) -> list[models.Entry]:
        result = await self.session.execute(
            select(models.Entry).where(models.Entry.user_id == user_id).order_by(models.Entry.id.desc())
        )
        return list(result.scalars().all())

    # winners

    async def add_winner(self, **kwargs) -> models.Winner:
        winner = models.Winner(**kwargs)
        self.session.add(winner)
        await self.session.flush()
        return winner

    async def get_winner(self, winner_id: int, for_update: bool = False) -> models.Winner | None:
        query = select(models.Winner).where(models.Winner.id == winner_id)
        if for_update:
            query = query.with_for_update(of=models.Winner)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_winners(self, giveaway_id: int) -> list[models.Winner]:
        result = await self.session.execute(
            select(models.Winner).where(models.Winner.giveaway_id == giveaway_id).order_by(models.Winner.id)
        )
        return list(result.scalars().all())

    async def get_pending_choices(self) -> list[models.Winner]:
        """Победители, которые уже выбрали приз, но выдача еще не закрыта."""
        result = await self.session.execute(
            select(models.Winner)
            .where(models.Winner.choice != WinnerChoice.PENDING, models.Winner.is_finished.is_(False))
            .order_by(models.Winner.created_at, models.Winner.id)
        )
        return list(result.scalars().all())

    async def get_win_counts(self, rarity: Rarity | None = None, giveaway_id: int | None = None):
        """(user_id, rarity, wins) для зала славы."""
        query = (
            select(models.Winner.user_id, models.Gift.rarity, func.count(models.Winner.id).label('wins'))
            .join(models.Gift, models.Gift.id == models.Winner.gift_id)
            .group_by(models.Winner.user_id, models.Gift.rarity)
        )
        if rarity is not None:
            query = query.where(models.Gift.rarity == rarity)
        if giveaway_id is not None:
            query = query.where(models.Winner.giveaway_id == giveaway_id)
        result = await self.session.execute(query)
        return result.all()
