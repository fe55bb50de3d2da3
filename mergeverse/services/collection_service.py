import config

from collections import defaultdict
from decimal import Decimal

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import Level
from mergeverse.database.repositories import ItemRepository, HistoryRepository, UserRepository
from mergeverse.utils.exceptions import forbidden, insufficient, invalid_state
from mergeverse.utils.misc_function import to_money


def owned_cells(items) -> tuple[dict, dict]:
    """level -> {gift_id}, gift_id -> {level без L0}"""
    by_level = defaultdict(set)
    by_gift = defaultdict(set)
    for item in items:
        by_level[item.level].add(item.gift_id)
        if item.level != Level.L0:
            by_gift[item.gift_id].add(item.level)
    return by_level, by_gift


class CollectionService:
    def __init__(self, db, catalog, referrals, full_prize: float = config.FULL_COLLECTION_PRIZE):
        self.db = db
        self.catalog = catalog
        self.referrals = referrals
        self.full_prize = to_money(full_prize)

    def _ensure_visible(self):
        if not self.catalog.collection_visible:
            raise forbidden("Collection is currently not available")

    def _collection_levels(self) -> list[Level]:
        return [level for level in models.PAID_LEVELS if level in self.catalog.vertical_prices]

    async def get_collection(self, user_id: int) -> list[models.Item]:
        self._ensure_visible()
        async with self.db.get_session() as session:
            return await ItemRepository(session).get_user_items(user_id)

    async def check_collection(self, user_id: int) -> dict:
        self._ensure_visible()
        async with self.db.get_session() as session:
            items = await ItemRepository(session).get_user_items(user_id)

        by_level, by_gift = owned_cells(items)
        gift_ids = {gift.id for gift in self.catalog.gifts}
        levels = self._collection_levels()

        vertical = [
            {
                "level": level,
                "is_complete": gift_ids <= by_level.get(level, set()),
                "owned": len(by_level.get(level, set()) & gift_ids),
                "required": len(gift_ids),
                "price": self.catalog.vertical_prices[level],
            }
            for level in levels
        ]
        horizontal = [
            {
                "gift": gift,
                "is_complete": len(by_gift.get(gift.id, set())) == len(levels),
                "owned": len(by_gift.get(gift.id, set())),
                "required": len(levels),
                "price": self.catalog.snapshot.horizontal.get(gift.id),
            }
            for gift in self.catalog.gifts
            if gift.id in self.catalog.snapshot.horizontal
        ]
        return {
            "is_complete": all(row["is_complete"] for row in vertical + horizontal),
            "vertical": vertical,
            "horizontal": horizontal,
        }

    async def _consume(self, session, user_id: int, cells) -> None:
        item_repo = ItemRepository(session)
        history_repo = HistoryRepository(session)
        for gift_id, level in cells:
            item = await item_repo.find_for_consumption(user_id, gift_id, level)
            if item is None:
                raise insufficient(f"Item {gift_id} at level {level.value} is no longer available")
            await item_repo.take(item)
            await history_repo.mark(user_id, gift_id, level)

    async def claim_vertical(self, user_id: int, level: Level) -> dict:
        price = self.catalog.vertical_prices.get(level)
        if price is None:
            raise invalid_state(f"Invalid level {level.value}")
        gift_ids = [gift.id for gift in self.catalog.gifts]

        async with self.db.transaction() as session:
            items = await ItemRepository(session).get_user_items(user_id, level=level, for_update=True)
            owned = {item.gift_id for item in items} & set(gift_ids)
            if len(owned) != len(gift_ids):
                raise invalid_state(
                    f"Vertical collection for level {level.value} is not complete. "
                    f"You have {len(owned)} out of {len(gift_ids)} gifts."
                )

            balance = await UserRepository(session).credit(user_id, price)
            await self._consume(session, user_id, [(gift_id, level) for gift_id in gift_ids])

        logger.info(f"User {user_id} claimed vertical prize {level.value}: {price}")
        return {"prize": price, "balance": balance}

    async def claim_horizontal(self, user_id: int, gift_id: int) -> dict:
        gift = self.catalog.get_gift(gift_id)
        price = self.catalog.horizontal_price(gift.id)
        levels = self._collection_levels()

        async with self.db.transaction() as session:
            items = await ItemRepository(session).get_user_items(user_id, gift_id=gift.id, for_update=True)
            owned = {item.level for item in items if item.level != Level.L0}
            if len(owned) != len(levels):
                raise invalid_state(
                    f"Horizontal collection for {gift.name} is not complete. "
                    f"You have {len(owned)} out of {len(levels)} levels."
                )

            balance = await UserRepository(session).credit(user_id, price)
            await self._consume(session, user_id, [(gift.id, level) for level in levels])

        logger.info(f"User {user_id} claimed horizontal prize for {gift.name}: {price}")
        return {"prize": price, "balance": balance}

    async def claim_full(self, user_id: int) -> dict:
        levels = self._collection_levels()
        gifts = self.catalog.gifts
        cells = [(gift.id, level) for level in levels for gift in gifts]

        async with self.db.transaction() as session:
            items = await ItemRepository(session).get_user_items(user_id, for_update=True)
            owned = {(item.gift_id, item.level) for item in items}
            for gift_id, level in cells:
                if (gift_id, level) not in owned:
                    gift = self.catalog.get_gift(gift_id)
                    raise invalid_state(f"Missing gift {gift.name} ({gift.rarity.value}) at level {level.value}")

            balance = await UserRepository(session).credit(user_id, self.full_prize)
            referral = await self.referrals.pay_full_collection_bonus(session, user_id)
            await self._consume(session, user_id, cells)

        logger.info(f"User {user_id} claimed full collection prize {self.full_prize}")
        return {
            "prize": self.full_prize,
            "balance": balance,
            "referral_bonus": referral[1] if referral else Decimal('0'),
        }

    async def archive_items(self, user_id: int | None = None) -> int:
        """Переносит все предметы (одного или всех пользователей) в History и удаляет их."""
        async with self.db.transaction() as session:
            item_repo = ItemRepository(session)
            history_repo = HistoryRepository(session)
            items = await item_repo.get_all_items(user_id)
            for cell in {(item.user_id, item.gift_id, item.level) for item in items}:
                await history_repo.mark(*cell)
            deleted = await item_repo.delete_all(user_id)

        logger.info(f"Archived {deleted} item stacks (user={user_id or 'all'})")
        return deleted
