import config

from datetime import timedelta
from decimal import Decimal

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import AuctionStatus
from mergeverse.database.repositories import AuctionRepository, ItemRepository, HistoryRepository, UserRepository
from mergeverse.utils.exceptions import forbidden, invalid_state, not_found
from mergeverse.utils.misc_function import get_time_now, as_aware, to_money, commission, seller_share


class AuctionService:
    def __init__(self, db, catalog):
        self.db = db
        self.catalog = catalog

    async def create_auction(self, user_id: int, item_id: int) -> models.Auction:
        """Выставляет один предмет из стека; предмет списывается сразу."""
        async with self.db.transaction() as session:
            item_repo = ItemRepository(session)
            item = await item_repo.get_item(item_id, user_id, for_update=True)
            if not item:
                raise not_found(f"Item {item_id} not found")
            if not item.is_tradeable:
                raise invalid_state("Item is not tradeable")

            gift = self.catalog.get_gift(item.gift_id)
            start = to_money(self.catalog.get_price(gift.rarity, item.level) * Decimal(str(config.AUCTION_START_MULTIPLIER)))
            gift_id, level = item.gift_id, item.level

            await item_repo.take(item)
            auction = await AuctionRepository(session).create(
                user_id=user_id,
                gift_id=gift_id,
                level=level,
                start=start,
                current=start,
                status=AuctionStatus.ACTIVE,
                ends_at=get_time_now() + timedelta(days=config.AUCTION_DURATION_DAYS),
            )

        logger.info(f"Auction {auction.id} created by {user_id}: gift {gift_id} {level.value}, start {start}")
        return auction

    @staticmethod
    def _check_biddable(auction: models.Auction | None, user_id: int, now):
        if not auction:
            raise not_found("Auction not found")
        if auction.status != AuctionStatus.ACTIVE:
            raise invalid_state("Auction is not active")
        if as_aware(auction.ends_at) <= now:
            raise invalid_state("Auction has ended")
        if auction.user_id == user_id:
            raise invalid_state("You cannot bid on your own auction")

    @staticmethod
    def _check_amount(auction: models.Auction, highest: models.Bid | None, own: models.Bid | None, amount: Decimal):
        if highest is None:
            if amount < auction.start:
                raise invalid_state(f"Bid must be at least {auction.start}")
        elif amount <= highest.amount:
            raise invalid_state(f"Bid must be higher than {highest.amount}")
        if own is not None and amount <= own.amount:
            raise invalid_state(f"Bid must be higher than your previous bid {own.amount}")

    async def place_bid(self, user_id: int, auction_id: int, amount) -> models.Bid:
        amount = to_money(amount)
        if amount <= 0:
            raise invalid_state("Bid amount must be positive")

        # предварительная проверка, внутри транзакции все перепроверяется
        async with self.db.get_session() as session:
            auction_repo = AuctionRepository(session)
            auction = await auction_repo.get(auction_id)
            self._check_biddable(auction, user_id, get_time_now())
            self._check_amount(
                auction,
                await auction_repo.get_highest_bid(auction_id),
                await auction_repo.get_bid(auction_id, user_id),
                amount,
            )

        async with self.db.transaction() as session:
            auction_repo = AuctionRepository(session)
            user_repo = UserRepository(session)

            auction = await auction_repo.get(auction_id, for_update=True)
            self._check_biddable(auction, user_id, get_time_now())
            highest = await auction_repo.get_highest_bid(auction_id, for_update=True)
            own = await auction_repo.get_bid(auction_id, user_id, for_update=True)
            self._check_amount(auction, highest, own, amount)

            is_leader = highest is not None and highest.user_id == user_id
            base_amount = amount - own.amount if is_leader else amount
            await user_repo.charge(user_id, base_amount + commission(base_amount))

            if highest is not None and not is_leader:
                refund = highest.amount + commission(highest.amount)
                await user_repo.credit(highest.user_id, refund)
                logger.info(f"Auction {auction_id}: refunded {refund} to outbid user {highest.user_id}")

            if own:
                own.amount = amount
                bid = own
            else:
                bid = await auction_repo.add_bid(auction_id=auction_id, user_id=user_id, amount=amount)
            auction.current = amount
            await session.flush()

        logger.info(f"Auction {auction_id}: bid {amount} by {user_id} (charged base {base_amount})")
        return bid

    async def _settle(self, session, auction: models.Auction) -> models.Auction:
        auction_repo = AuctionRepository(session)
        item_repo = ItemRepository(session)
        highest = await auction_repo.get_highest_bid(auction.id)

        if highest:
            # выигранные предметы всегда непередаваемые
            await item_repo.add_item(highest.user_id, auction.gift_id, auction.level, False)
            await HistoryRepository(session).mark(highest.user_id, auction.gift_id, auction.level)
            payout = seller_share(highest.amount)
            await UserRepository(session).credit(auction.user_id, payout)
            auction.status = AuctionStatus.FINISHED
            logger.info(f"Auction {auction.id} finished: winner {highest.user_id}, "
                        f"bid {highest.amount}, seller {auction.user_id} gets {payout}")
        else:
            await item_repo.add_item(auction.user_id, auction.gift_id, auction.level, True)
            auction.status = AuctionStatus.CANCELLED
            logger.info(f"Auction {auction.id} cancelled without bids, item returned to {auction.user_id}")

        await session.flush()
        return auction

    async def finish_auction(self, user_id: int, auction_id: int) -> models.Auction:
        async with self.db.transaction() as session:
            auction = await AuctionRepository(session).get(auction_id, for_update=True)
            if not auction:
                raise not_found("Auction not found")
            if auction.user_id != user_id:
                raise forbidden("Only the seller can finish the auction")
            if auction.status != AuctionStatus.ACTIVE:
                raise invalid_state("Auction is not active")
            return await self._settle(session, auction)

    async def settle_expired(self) -> int:
        async with self.db.get_session() as session:
            auction_ids = await AuctionRepository(session).get_expired_ids(get_time_now())

        settled = 0
        for auction_id in auction_ids:
            try:
                async with self.db.transaction() as session:
                    auction = await AuctionRepository(session).get(auction_id, for_update=True)
                    if not auction or auction.status != AuctionStatus.ACTIVE:
                        continue
                    await self._settle(session, auction)
                settled += 1
            except Exception as e:
                logger.exception(f"Failed to settle auction {auction_id}: {e}")
        return settled

    async def list_auctions(self, status: AuctionStatus | None = AuctionStatus.ACTIVE) -> list[models.Auction]:
        async with self.db.get_session() as session:
            return await AuctionRepository(session).get_auctions(status)

    async def get_auction(self, auction_id: int) -> models.Auction:
        async with self.db.get_session() as session:
            auction = await AuctionRepository(session).get(auction_id, with_bids=True)
        if not auction:
            raise not_found("Auction not found")
        return auction

    async def user_auctions(self, user_id: int) -> list[models.Auction]:
        async with self.db.get_session() as session:
            return await AuctionRepository(session).get_user_auctions(user_id)
