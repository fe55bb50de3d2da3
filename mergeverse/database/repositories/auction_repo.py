from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from mergeverse.database import models
from mergeverse.database.models import AuctionStatus


class AuctionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> models.Auction:
        auction = models.Auction(**kwargs)
        self.session.add(auction)
        await self.session.flush()
        return auction

    async def get(self, auction_id: int, for_update: bool = False, with_bids: bool = False) -> models.Auction | None:
        query = select(models.Auction).where(models.Auction.id == auction_id)
        if with_bids:
            query = query.options(selectinload(models.Auction.bids))
        if for_update:
            query = query.with_for_update(of=models.Auction)
        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def get_auctions(self, status: AuctionStatus | None = AuctionStatus.ACTIVE) -> list[models.Auction]:
        query = select(models.Auction)
        if status is not None:
            query = query.where(models.Auction.status == status)
        result = await self.session.execute(query.order_by(models.Auction.ends_at))
        return list(result.scalars().all())

    async def get_user_auctions(self, user_id: int) -> list[models.Auction]:
        result = await self.session.execute(
            select(models.Auction)
            .where(models.Auction.user_id == user_id)
            .order_by(models.Auction.created_at.desc(), models.Auction.id.desc())
        )
        return list(result.scalars().all())

    async def get_expired_ids(self, now: datetime) -> list[int]:
        result = await self.session.execute(
            select(models.Auction.id).where(
                models.Auction.status == AuctionStatus.ACTIVE,
                models.Auction.ends_at <= now,
            )
        )
        return list(result.scalars().all())

    async def get_highest_bid(self, auction_id: int, for_update: bool = False) -> models.Bid | None:
        query = (
            select(models.Bid)
            .where(models.Bid.auction_id == auction_id)
            .order_by(models.Bid.amount.desc(), models.Bid.updated_at.asc())
            .limit(1)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_bid(self, auction_id: int, user_id: int, for_update: bool = False) -> models.Bid | None:
        query = select(models.Bid).where(models.Bid.auction_id == auction_id, models.Bid.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def add_bid(self, **kwargs) -> models.Bid:
        bid = models.Bid(**kwargs)
        self.session.add(bid)
        await self.session.flush()
        return bid
