from decimal import Decimal

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import (Rarity, PAID_LEVELS, ReferralSettingsName, ValueType,
                                        SystemSettingsName)
from mergeverse.database.repositories import CatalogRepository, SettingsRepository

import config

GIFTS = [
    ('Sharp Tongue', Rarity.COMMON, 'SharpTongue-1'),
    ('Westside Sign', Rarity.COMMON, 'WestsideSign-505XXX'),
    ('Scared Cat', Rarity.COMMON, 'ScaredCat-505XXX'),
    ('Genie Lamp', Rarity.COMMON, 'GenieLamp-505XXX'),
    ('Bonded Ring', Rarity.RARE, 'BondedRing-505XXX'),
    ('Gem Signet', Rarity.RARE, 'GemSignet-505XXX'),
    ('Magic Potion', Rarity.RARE, 'MagicPotion-505XXX'),
    ('Ion Gem', Rarity.RARE, 'IonGem-505XXX'),
    ('Mini Oscar', Rarity.EPIC, 'MiniOscar-505XXX'),
    ('Perfume Bottle', Rarity.EPIC, 'PerfumeBottle-505XXX'),
    ('Loot Bag', Rarity.EPIC, 'LootBag-505XXX'),
    ('Astral Shard', Rarity.EPIC, 'AstralShard-505XXX'),
    ('Nail Bracelet', Rarity.LEGENDARY, 'NailBracelet-505XXX'),
    ('Artisan Brick', Rarity.LEGENDARY, 'ArtisanBrick-505XXX'),
    ('Heroic Helmet', Rarity.LEGENDARY, 'HeroicHelmet-505'),
    ('Mighty Arm', Rarity.LEGENDARY, 'MightyArm-505XXX'),
    ('Precious Peach', Rarity.MYTHIC, 'PreciousPeach-505XXX'),
    ("Durov's Cap", Rarity.MYTHIC, 'DurovsCap-1'),
    ('Heart Locket', Rarity.MYTHIC, 'HeartLocket-505XXX'),
    ('Plush Pepe', Rarity.MYTHIC, 'PlushPepe-1'),
]

# цена L1, каждый следующий уровень вдвое дороже
BASE_PRICES = {
    Rarity.COMMON: Decimal('0.05'),
    Rarity.RARE: Decimal('0.10'),
    Rarity.EPIC: Decimal('0.25'),
    Rarity.LEGENDARY: Decimal('0.80'),
    Rarity.MYTHIC: Decimal('3.00'),
}

# награда за комплект на 10% выше суммы его ячеек
SET_BONUS = Decimal('1.1')

REFERRAL_DEFAULTS = {
    ReferralSettingsName.REFERRAL_FIRST_LEVEL: (ValueType.PERCENTAGE, Decimal('4')),
    ReferralSettingsName.REFERRAL_SECOND_LEVEL: (ValueType.PERCENTAGE, Decimal('2')),
    ReferralSettingsName.REFERRAL_FULL_COLLECTION: (ValueType.FIXED, Decimal('22.50')),
}


def gift_url(slug: str) -> str:
    return f'https://nft.fragment.com/gift/{slug}.lottie.json'


def price_table(base_prices: dict = BASE_PRICES) -> dict:
    return {
        (rarity, level): base * (2 ** index)
        for rarity, base in base_prices.items()
        for index, level in enumerate(PAID_LEVELS)
    }


async def seed_catalog(session, gifts=GIFTS, base_prices: dict = BASE_PRICES) -> bool:
    """
    Заполняет справочники, если таблица подарков пустая.
    Возвращает True, если что-то было записано.
    """
    catalog_repo = CatalogRepository(session)
    if await catalog_repo.count_gifts():
        return False

    gift_rows = [models.Gift(name=name, rarity=rarity, url=gift_url(slug)) for name, rarity, slug in gifts]
    session.add_all(gift_rows)
    await session.flush()

    prices = price_table(base_prices)
    session.add_all(
        models.Price(rarity=rarity, level=level, price=price)
        for (rarity, level), price in prices.items()
    )

    for level in PAID_LEVELS:
        total = sum(prices[(gift.rarity, level)] for gift in gift_rows)
        session.add(models.VerticalPrice(level=level, price=(total * SET_BONUS).quantize(Decimal('0.01'))))

    for gift in gift_rows:
        total = sum(prices[(gift.rarity, level)] for level in PAID_LEVELS)
        session.add(models.HorizontalPrice(gift_id=gift.id, price=(total * SET_BONUS).quantize(Decimal('0.01'))))

    for name, (value_type, value) in REFERRAL_DEFAULTS.items():
        await catalog_repo.set_referral_setting(name, value_type, value)

    settings_repo = SettingsRepository(session)
    if await settings_repo.get(SystemSettingsName.GIVEAWAY_STEPS.value) is None:
        await settings_repo.set(SystemSettingsName.GIVEAWAY_STEPS.value, str(config.GIVEAWAY_DEFAULT_STEPS))
    if await settings_repo.get(SystemSettingsName.COLLECTION_VISIBLE.value) is None:
        await settings_repo.set(SystemSettingsName.COLLECTION_VISIBLE.value, 'true')

    await session.flush()
    logger.info(f"Seeded catalog: {len(gift_rows)} gifts, {len(prices)} prices")
    return True


async def seed_if_empty(db) -> bool:
    async with db.transaction() as session:
        return await seed_catalog(session)
