from enum import Enum


class Rarity(str, Enum):
    COMMON = 'COMMON'
    RARE = 'RARE'
    EPIC = 'EPIC'
    LEGENDARY = 'LEGENDARY'
    MYTHIC = 'MYTHIC'


class Level(str, Enum):
    L0 = 'L0'
    L1 = 'L1'
    L2 = 'L2'
    L3 = 'L3'
    L4 = 'L4'
    L5 = 'L5'
    L6 = 'L6'
    L7 = 'L7'
    L8 = 'L8'
    L9 = 'L9'
    L10 = 'L10'


LEVELS = list(Level)
PAID_LEVELS = LEVELS[1:]
MAX_LEVEL = Level.L10
RARITY_ORDER = list(Rarity)


def next_level(level: Level) -> Level | None:
    """L0 -> L1 -> ... -> L10; None past the max level."""
    index = LEVELS.index(level)
    if index + 1 >= len(LEVELS):
        return None
    return LEVELS[index + 1]


class AuctionStatus(str, Enum):
    ACTIVE = 'ACTIVE'
    FINISHED = 'FINISHED'
    CANCELLED = 'CANCELLED'


class GiveawayStatus(str, Enum):
    PENDING = 'PENDING'
    ACTIVE = 'ACTIVE'
    FINISHED = 'FINISHED'
    CANCELLED = 'CANCELLED'


class WinnerChoice(str, Enum):
    PENDING = 'PENDING'
    GIFT = 'GIFT'
    COMPENSATION = 'COMPENSATION'


class PackType(str, Enum):
    FREE_DAILY = 'FREE_DAILY'
    FREE_STREAK = 'FREE_STREAK'
    COMMON_PACK = 'COMMON_PACK'
    RARE_PACK = 'RARE_PACK'
    EPIC_PACK = 'EPIC_PACK'
    LEGENDARY_PACK = 'LEGENDARY_PACK'


class ReferralSettingsName(str, Enum):
    REFERRAL_FIRST_LEVEL = 'REFERRAL_FIRST_LEVEL'
    REFERRAL_SECOND_LEVEL = 'REFERRAL_SECOND_LEVEL'
    REFERRAL_FULL_COLLECTION = 'REFERRAL_FULL_COLLECTION'


class ValueType(str, Enum):
    PERCENTAGE = 'PERCENTAGE'
    FIXED = 'FIXED'


class PaymentStatus(str, Enum):
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    FAILED = 'FAILED'


class PayoutStatus(str, Enum):
    PROCESSING = 'PROCESSING'
    COMPLETED = 'COMPLETED'
    FAILED = 'FAILED'


class SystemSettingsName(str, Enum):
    GIVEAWAY_STEPS = 'GIVEAWAY_STEPS'
    COLLECTION_VISIBLE = 'COLLECTION_VISIBLE'
