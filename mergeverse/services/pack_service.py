import random
import pytz
import config

from dataclasses import dataclass, field
from datetime import timedelta

from mergeverse.logger import logger
from mergeverse.database.models import PackType, Level
from mergeverse.database.repositories import UserRepository, ItemRepository, CompensationRepository
from mergeverse.services.catalog import GiftInfo
from mergeverse.services.packs import PACKS, PAID_PACKS, PackConfig
from mergeverse.utils.exceptions import invalid_state, not_found
from mergeverse.utils.misc_function import get_time_now, as_aware


@dataclass
class PackResult:
    pack_type: PackType
    level: Level
    is_tradeable: bool
    gifts: list[GiftInfo] = field(default_factory=list)
    streak: int | None = None


class PackService:
    def __init__(self, db, catalog, rng: random.Random | None = None):
        self.db = db
        self.catalog = catalog
        self.rng = rng

    def draw(self, pack: PackConfig) -> list[GiftInfo]:
        """Одна выборка без повторов на каждую редкость; в корзине не больше подарков, чем в каталоге."""
        gifts = []
        for rarity, count in pack.composition.items():
            gifts.extend(self.catalog.random_gifts(rarity, count, self.rng))
        return gifts

    async def _open(self, session, user_id: int, pack: PackConfig) -> PackResult:
        gifts = self.draw(pack)
        item_repo = ItemRepository(session)
        for gift in gifts:
            await item_repo.add_item(user_id, gift.id, pack.level, pack.is_tradeable)
        return PackResult(pack_type=pack.type, level=pack.level, is_tradeable=pack.is_tradeable, gifts=gifts)

    async def claim_free_pack(self, user_id: int) -> PackResult:
        now = get_time_now()
        tz = pytz.timezone(config.TIMEZONE)

        async with self.db.transaction() as session:
            user = await UserRepository(session).get_user(user_id, for_update=True)
            if not user:
                raise not_found(f"User {user_id} not found")

            if user.active_at and as_aware(user.active_at).astimezone(tz).date() == now.date():
                raise invalid_state("Free pack already claimed today")

            new_streak = (user.streak or 0) + 1
            if new_streak >= config.STREAK_LENGTH:
                pack = PACKS[PackType.FREE_STREAK]
                new_streak = 0
            else:
                pack = PACKS[PackType.FREE_DAILY]

            result = await self._open(session, user_id, pack)
            user.streak = new_streak
            user.active_at = now
            result.streak = new_streak

        logger.info(f"User {user_id} claimed {pack.type.value}, streak={new_streak}")
        return result

    async def buy_pack(self, user_id: int, pack_type: PackType) -> PackResult:
        if pack_type not in PAID_PACKS:
            raise invalid_state(f"Pack {pack_type.value} is not for sale")
        pack = PACKS[pack_type]

        async with self.db.transaction() as session:
            await UserRepository(session).charge(user_id, pack.price)
            result = await self._open(session, user_id, pack)

        logger.info(f"User {user_id} bought {pack_type.value} for {pack.price}")
        return result

    def list_paid_packs(self) -> list[PackConfig]:
        return [PACKS[pack_type] for pack_type in PAID_PACKS]

    async def list_compensations(self, user_id: int):
        async with self.db.get_session() as session:
            return await CompensationRepository(session).get_user_compensations(user_id)

    async def open_compensation(self, user_id: int, compensation_id: int) -> PackResult:
        async with self.db.transaction() as session:
            compensation_repo = CompensationRepository(session)
            row = await compensation_repo.get(compensation_id, user_id, for_update=True)
            if not row or row.amount <= 0:
                raise not_found(f"Compensation {compensation_id} not found")

            result = await self._open(session, user_id, PACKS[row.pack_type])
            await compensation_repo.take_one(row)

        logger.info(f"User {user_id} opened compensation {result.pack_type.value}")
        return result

    async def reset_streaks(self) -> int:
        async with self.db.transaction() as session:
            count = await UserRepository(session).reset_streaks(get_time_now() - timedelta(hours=24))
        if count:
            logger.info(f"Streak reset for {count} users")
        return count
