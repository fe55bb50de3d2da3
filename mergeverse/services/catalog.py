import random

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

import config

from mergeverse.logger import logger
from mergeverse.database.models import Level, Rarity, ReferralSettingsName, ValueType, SystemSettingsName
from mergeverse.database.repositories import CatalogRepository, SettingsRepository
from mergeverse.utils.exceptions import not_found
from mergeverse.utils.misc_function import pick_random


@dataclass(frozen=True)
class GiftInfo:
    id: int
    name: str
    rarity: Rarity
    url: str | None = None


@dataclass(frozen=True)
class ReferralRule:
    type: ValueType
    value: Decimal


@dataclass(frozen=True)
class CatalogSnapshot:
    gifts: tuple[GiftInfo, ...] = ()
    prices: Mapping[tuple[Rarity, Level], Decimal] = field(default_factory=dict)
    vertical: Mapping[Level, Decimal] = field(default_factory=dict)
    horizontal: Mapping[int, Decimal] = field(default_factory=dict)
    referral: Mapping[ReferralSettingsName, ReferralRule] = field(default_factory=dict)
    giveaway_steps: int = config.GIVEAWAY_DEFAULT_STEPS
    collection_visible: bool = True

    @property
    def gifts_by_id(self) -> Mapping[int, GiftInfo]:
        return {gift.id: gift for gift in self.gifts}


def _parse_steps(raw: str | None) -> int:
    try:
        steps = int(raw) if raw is not None else config.GIVEAWAY_DEFAULT_STEPS
    except ValueError:
        logger.warning(f"Invalid GIVEAWAY_STEPS value {raw!r}, using default")
        return config.GIVEAWAY_DEFAULT_STEPS
    return steps if steps >= 1 else config.GIVEAWAY_DEFAULT_STEPS


class Catalog:
    """
    Справочные данные в памяти процесса.

    ``load()`` читает все таблицы разом и подменяет снимок целиком,
    так что читатели видят либо старый, либо новый снимок, но не смесь.
    Админские изменения обязаны вызывать ``reload()``.
    """

    def __init__(self, db):
        self.db = db
        self._snapshot: CatalogSnapshot | None = None

    async def load(self) -> CatalogSnapshot:
        async with self.db.get_session() as session:
            catalog_repo = CatalogRepository(session)
            settings_repo = SettingsRepository(session)

            gifts = await catalog_repo.get_gifts()
            prices = await catalog_repo.get_prices()
            vertical = await catalog_repo.get_vertical_prices()
            horizontal = await catalog_repo.get_horizontal_prices()
            referral = await catalog_repo.get_referral_settings()
            settings = await settings_repo.get_all()

        snapshot = CatalogSnapshot(
            gifts=tuple(GiftInfo(id=g.id, name=g.name, rarity=g.rarity, url=g.url) for g in gifts),
            prices=MappingProxyType({(p.rarity, p.level): p.price for p in prices}),
            vertical=MappingProxyType({v.level: v.price for v in vertical}),
            horizontal=MappingProxyType({h.gift_id: h.price for h in horizontal}),
            referral=MappingProxyType({r.name: ReferralRule(type=r.type, value=r.value) for r in referral}),
            giveaway_steps=_parse_steps(settings.get(SystemSettingsName.GIVEAWAY_STEPS.value)),
            collection_visible=(settings.get(SystemSettingsName.COLLECTION_VISIBLE.value) or 'true').lower() == 'true',
        )
        self._snapshot = snapshot
        logger.info(f"Catalog loaded: {len(snapshot.gifts)} gifts, {len(snapshot.prices)} prices, "
                    f"steps={snapshot.giveaway_steps}, collection_visible={snapshot.collection_visible}")
        return snapshot

    async def reload(self) -> CatalogSnapshot:
        return await self.load()

    @property
    def snapshot(self) -> CatalogSnapshot:
        if self._snapshot is None:
            raise RuntimeError("Catalog is not loaded")
        return self._snapshot

    @property
    def gifts(self) -> tuple[GiftInfo, ...]:
        return self.snapshot.gifts

    def get_gift(self, gift_id: int) -> GiftInfo:
        gift = self.snapshot.gifts_by_id.get(gift_id)
        if gift is None:
            raise not_found(f"Gift {gift_id} not found")
        return gift

    def gifts_of(self, rarity: Rarity) -> list[GiftInfo]:
        return [gift for gift in self.snapshot.gifts if gift.rarity == rarity]

    def random_gifts(self, rarity: Rarity, amount: int, rng: random.Random | None = None) -> list[GiftInfo]:
        return pick_random(self.gifts_of(rarity), amount, rng)

    def get_price(self, rarity: Rarity, level: Level) -> Decimal:
        price = self.snapshot.prices.get((rarity, level))
        if price is None:
            raise not_found(f"Price for {rarity.value} {level.value} not found")
        return price

    @property
    def vertical_prices(self) -> Mapping[Level, Decimal]:
        return self.snapshot.vertical

    def horizontal_price(self, gift_id: int) -> Decimal:
        price = self.snapshot.horizontal.get(gift_id)
        if price is None:
            raise not_found(f"Horizontal price for gift {gift_id} not found")
        return price

    def referral_setting(self, name: ReferralSettingsName) -> ReferralRule | None:
        return self.snapshot.referral.get(name)

    @property
    def giveaway_steps(self) -> int:
        return self.snapshot.giveaway_steps

    @property
    def collection_visible(self) -> bool:
        return self.snapshot.collection_visible
