import math
import random
import pytz
import config

from datetime import datetime
from decimal import Decimal, ROUND_CEILING, ROUND_DOWN, ROUND_HALF_UP
from typing import Sequence, TypeVar

T = TypeVar('T')

CENT = Decimal('0.01')


def get_time_now() -> datetime:
    """Возвращает текущее время с временной зоной из конфига"""
    return datetime.now(pytz.timezone(config.TIMEZONE))


def as_aware(value: datetime | None) -> datetime | None:
    # sqlite отдает naive datetime, postgres - aware
    if value is None or value.tzinfo is not None:
        return value
    return pytz.timezone(config.TIMEZONE).localize(value)


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def commission(amount: Decimal, rate: float = config.AUCTION_COMMISSION) -> Decimal:
    """Commission on ``amount``, rounded up to the cent."""
    return (to_money(amount) * Decimal(str(rate))).quantize(CENT, rounding=ROUND_CEILING)


def seller_share(amount: Decimal, rate: float = config.AUCTION_COMMISSION) -> Decimal:
    return (to_money(amount) * (1 - Decimal(str(rate)))).quantize(CENT, rounding=ROUND_DOWN)


def pick_random(items: Sequence[T], n: int, rng: random.Random | None = None) -> list[T]:
    """
    Partial Fisher-Yates shuffle: ``min(n, len(items))`` distinct elements,
    drawn uniformly without replacement. The input is left untouched.
    """
    rng = rng or random
    pool = list(items)
    count = max(0, min(n, len(pool)))

    for i in range(count):
        j = rng.randrange(i, len(pool))
        pool[i], pool[j] = pool[j], pool[i]

    return pool[:count]


def winners_count(entries: int, steps: int, cap: int = config.GIVEAWAY_MAX_WINNERS) -> int:
    if entries <= 0:
        return 0
    return min(cap, math.ceil(entries / steps))
