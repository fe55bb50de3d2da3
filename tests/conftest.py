import random

import pytest
from sqlalchemy.pool import StaticPool

from mergeverse.database.pg_pool import DataBase
from mergeverse.database.seed import seed_catalog
from mergeverse.services import build_services

from tests.helpers import ADMIN_ID, BOT_TOKEN, IPN_KEY, TEST_BASE_PRICES, TEST_GIFTS, FakeNotifier


@pytest.fixture
async def db():
    database = DataBase("sqlite+aiosqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    await database.check_and_create_tables()
    async with database.transaction() as session:
        await seed_catalog(session, gifts=TEST_GIFTS, base_prices=TEST_BASE_PRICES)
    yield database
    await database.dispose()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
async def services(db, notifier):
    built = build_services(
        db,
        notifier=notifier,
        rng=random.Random(42),
        bot_token=BOT_TOKEN,
        admin_ids=[ADMIN_ID],
        ipn_key=IPN_KEY,
    )
    await built.catalog.load()
    return built
