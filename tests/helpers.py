import json
import time

from decimal import Decimal
from urllib.parse import urlencode

from mergeverse.database.models import Rarity, Level
from mergeverse.database.repositories import UserRepository, ItemRepository
from mergeverse.utils.telegram_auth import sign_init_data

BOT_TOKEN = "123456:TEST-TOKEN"
IPN_KEY = "test-ipn-key"
ADMIN_ID = 1000

TEST_GIFTS = [
    ('Sharp Tongue', Rarity.COMMON, 'SharpTongue-1'),
    ('Bonded Ring', Rarity.RARE, 'BondedRing-505XXX'),
    ('Mini Oscar', Rarity.EPIC, 'MiniOscar-505XXX'),
    ('Nail Bracelet', Rarity.LEGENDARY, 'NailBracelet-505XXX'),
    ('Plush Pepe', Rarity.MYTHIC, 'PlushPepe-1'),
]

TEST_BASE_PRICES = {
    Rarity.COMMON: Decimal('10'),
    Rarity.RARE: Decimal('20'),
    Rarity.EPIC: Decimal('50'),
    Rarity.LEGENDARY: Decimal('100'),
    Rarity.MYTHIC: Decimal('300'),
}


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send_winner_notification(self, user_id, winner_id, gift_name, rarity):
        if self.fail:
            raise RuntimeError("telegram is down")
        self.sent.append((user_id, winner_id, gift_name, rarity))


def gift_id(services, name: str) -> int:
    return next(g.id for g in services.catalog.gifts if g.name == name)


async def make_user(db, user_id: int, balance=0, referred_by: int | None = None, **kwargs):
    async with db.transaction() as session:
        return await UserRepository(session).create_user(
            user_id=user_id,
            user_name=f"user{user_id}",
            balance=Decimal(str(balance)),
            referred_by=referred_by,
            **kwargs,
        )


async def give_item(db, user_id: int, gift: int, level: Level, is_tradeable: bool = True, quantity: int = 1):
    async with db.transaction() as session:
        return await ItemRepository(session).add_item(user_id, gift, level, is_tradeable, quantity)


async def get_user(db, user_id: int):
    async with db.get_session() as session:
        return await UserRepository(session).get_user(user_id)


async def get_items(db, user_id: int, **filters):
    async with db.get_session() as session:
        return await ItemRepository(session).get_user_items(user_id, **filters)


def make_init_data(user_id: int, username: str = "tester", start_param: str | None = None,
                   auth_date: int | None = None, token: str = BOT_TOKEN) -> str:
    pairs = {
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps({"id": user_id, "first_name": "Test", "username": username}),
    }
    if start_param is not None:
        pairs["start_param"] = start_param
    pairs["hash"] = sign_init_data(pairs, token)
    return urlencode(pairs)
