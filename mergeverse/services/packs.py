from dataclasses import dataclass, field
from decimal import Decimal

from mergeverse.database.models import PackType, Rarity, Level


@dataclass(frozen=True)
class PackConfig:
    type: PackType
    price: Decimal
    level: Level
    is_tradeable: bool
    composition: dict[Rarity, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.composition.values())


PACKS: dict[PackType, PackConfig] = {
    PackType.FREE_DAILY: PackConfig(
        type=PackType.FREE_DAILY, price=Decimal('0'), level=Level.L0, is_tradeable=False,
        composition={Rarity.COMMON: 7, Rarity.RARE: 2, Rarity.EPIC: 1},
    ),
    PackType.FREE_STREAK: PackConfig(
        type=PackType.FREE_STREAK, price=Decimal('0'), level=Level.L0, is_tradeable=False,
        composition={Rarity.COMMON: 9, Rarity.RARE: 4, Rarity.EPIC: 2},
    ),
    PackType.COMMON_PACK: PackConfig(
        type=PackType.COMMON_PACK, price=Decimal('0.7'), level=Level.L1, is_tradeable=True,
        composition={Rarity.COMMON: 10, Rarity.RARE: 5},
    ),
    PackType.RARE_PACK: PackConfig(
        type=PackType.RARE_PACK, price=Decimal('1.4'), level=Level.L1, is_tradeable=True,
        composition={Rarity.RARE: 12, Rarity.EPIC: 3},
    ),
    PackType.EPIC_PACK: PackConfig(
        type=PackType.EPIC_PACK, price=Decimal('4.0'), level=Level.L1, is_tradeable=True,
        composition={Rarity.EPIC: 13, Rarity.LEGENDARY: 2},
    ),
    PackType.LEGENDARY_PACK: PackConfig(
        type=PackType.LEGENDARY_PACK, price=Decimal('13.0'), level=Level.L1, is_tradeable=True,
        composition={Rarity.LEGENDARY: 14, Rarity.MYTHIC: 1},
    ),
}

FREE_PACKS = (PackType.FREE_DAILY, PackType.FREE_STREAK)
PAID_PACKS = tuple(pack_type for pack_type in PACKS if pack_type not in FREE_PACKS)

# компенсация участникам розыгрыша: редкость подарка -> (тип пака, количество)
COMPENSATIONS: dict[Rarity, tuple[PackType, int]] = {
    Rarity.COMMON: (PackType.COMMON_PACK, 3),
    Rarity.RARE: (PackType.RARE_PACK, 4),
    Rarity.EPIC: (PackType.EPIC_PACK, 6),
    Rarity.LEGENDARY: (PackType.LEGENDARY_PACK, 3),
    Rarity.MYTHIC: (PackType.LEGENDARY_PACK, 12),
}
