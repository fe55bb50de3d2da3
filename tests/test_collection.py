from decimal import Decimal

import pytest

from mergeverse.database.models import Level, PAID_LEVELS
from mergeverse.database.repositories import HistoryRepository, ItemRepository
from mergeverse.utils.exceptions import ErrorKind, ServiceError

from tests.helpers import make_user, give_item, get_items, get_user


async def fill_level(db, services, user_id, level, is_tradeable=True):
    for gift in services.catalog.gifts:
        await give_item(db, user_id, gift.id, level, is_tradeable=is_tradeable)


async def fill_gift(db, user_id, gift, is_tradeable=True):
    for level in PAID_LEVELS:
        await give_item(db, user_id, gift, level, is_tradeable=is_tradeable)


async def test_check_collection_progress(db, services):
    await make_user(db, 1)
    await fill_level(db, services, 1, Level.L1)
    await give_item(db, 1, services.catalog.gifts[0].id, Level.L2)
    # L0 не считается ни в одну строку
    await give_item(db, 1, services.catalog.gifts[1].id, Level.L0)

    result = await services.collection.check_collection(1)

    assert result["is_complete"] is False
    vertical = {row["level"]: row for row in result["vertical"]}
    assert len(vertical) == len(PAID_LEVELS)
    assert vertical[Level.L1]["is_complete"] is True
    assert vertical[Level.L1]["price"] == Decimal('528.00')
    assert vertical[Level.L2]["owned"] == 1
    assert vertical[Level.L2]["required"] == 5

    horizontal = {row["gift"].id: row for row in result["horizontal"]}
    assert horizontal[services.catalog.gifts[0].id]["owned"] == 2
    assert horizontal[services.catalog.gifts[1].id]["owned"] == 1
    assert all(not row["is_complete"] for row in horizontal.values())


async def test_claim_vertical(db, services):
    await make_user(db, 1, balance=5)
    await fill_level(db, services, 1, Level.L1)
    extra_gift = services.catalog.gifts[0].id
    await give_item(db, 1, extra_gift, Level.L1, is_tradeable=False)

    result = await services.collection.claim_vertical(1, Level.L1)

    assert result["prize"] == Decimal('528.00')
    assert result["balance"] == Decimal('533.00')
    # непередаваемый стек расходуется первым
    items = await get_items(db, 1)
    assert [(i.gift_id, i.is_tradeable, i.quantity) for i in items] == [(extra_gift, True, 1)]

    async with db.get_session() as session:
        history = await HistoryRepository(session).get_user_history(1)
    assert {(gift.id, Level.L1) for gift in services.catalog.gifts} <= history


async def test_claim_vertical_incomplete(db, services):
    await make_user(db, 1)
    for gift in services.catalog.gifts[:-1]:
        await give_item(db, 1, gift.id, Level.L3)

    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_vertical(1, Level.L3)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert "4 out of 5" in exc.value.message
    assert len(await get_items(db, 1)) == 4
    assert (await get_user(db, 1)).balance == Decimal('0')


async def test_claim_vertical_rejects_l0(db, services):
    await make_user(db, 1)
    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_vertical(1, Level.L0)
    assert exc.value.kind == ErrorKind.INVALID_STATE


async def test_claim_vertical_stale_read_rolls_back(db, services, monkeypatch):
    await make_user(db, 1)
    await fill_level(db, services, 1, Level.L1)
    stale = await get_items(db, 1, level=Level.L1)

    first = await services.collection.claim_vertical(1, Level.L1)
    assert first["balance"] == Decimal('528.00')

    # повторная проверка видит уже израсходованные предметы
    async def stale_items(self, user_id, level=None, gift_id=None, for_update=False):
        return stale

    monkeypatch.setattr(ItemRepository, "get_user_items", stale_items)
    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_vertical(1, Level.L1)

    assert exc.value.kind == ErrorKind.INSUFFICIENT_RESOURCE
    assert (await get_user(db, 1)).balance == Decimal('528.00')


async def test_claim_horizontal(db, services):
    await make_user(db, 1)
    gift = services.catalog.gifts[0].id
    await fill_gift(db, 1, gift)
    await give_item(db, 1, gift, Level.L0)

    result = await services.collection.claim_horizontal(1, gift)

    assert result["prize"] == Decimal('11253.00')
    assert result["balance"] == Decimal('11253.00')
    assert [i.level for i in await get_items(db, 1)] == [Level.L0]


async def test_claim_horizontal_missing_level(db, services):
    await make_user(db, 1)
    gift = services.catalog.gifts[0].id
    for level in PAID_LEVELS[:-1]:
        await give_item(db, 1, gift, level)

    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_horizontal(1, gift)
    assert "9 out of 10" in exc.value.message

    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_horizontal(1, 99999)
    assert exc.value.kind == ErrorKind.NOT_FOUND


async def test_claim_full_pays_referrer(db, services):
    await make_user(db, 10)
    await make_user(db, 1, referred_by=10)
    for gift in services.catalog.gifts:
        await fill_gift(db, 1, gift.id)

    assert (await services.collection.check_collection(1))["is_complete"] is True
    result = await services.collection.claim_full(1)

    assert result["prize"] == Decimal('450.00')
    assert result["referral_bonus"] == Decimal('22.50')
    assert (await get_user(db, 1)).balance == Decimal('450.00')
    assert (await get_user(db, 10)).balance == Decimal('22.50')
    assert await get_items(db, 1) == []


async def test_claim_full_missing_cell(db, services):
    await make_user(db, 1)
    for gift in services.catalog.gifts[1:]:
        await fill_gift(db, 1, gift.id)

    with pytest.raises(ServiceError) as exc:
        await services.collection.claim_full(1)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert services.catalog.gifts[0].name in exc.value.message


async def test_hidden_collection_blocks_reads_only(db, services):
    await make_user(db, 1)
    await fill_level(db, services, 1, Level.L1)
    await services.admin.set_collection_visible(False)

    with pytest.raises(ServiceError) as exc:
        await services.collection.get_collection(1)
    assert exc.value.kind == ErrorKind.FORBIDDEN
    with pytest.raises(ServiceError):
        await services.collection.check_collection(1)

    result = await services.collection.claim_vertical(1, Level.L1)
    assert result["prize"] == Decimal('528.00')

    await services.admin.set_collection_visible(True)
    assert await services.collection.get_collection(1) == []


async def test_archive_items(db, services):
    await make_user(db, 1)
    await make_user(db, 2)
    gift = services.catalog.gifts[0].id
    await give_item(db, 1, gift, Level.L5, quantity=3)
    await give_item(db, 2, gift, Level.L6)

    assert await services.collection.archive_items(1) == 1
    assert await get_items(db, 1) == []
    assert len(await get_items(db, 2)) == 1

    async with db.get_session() as session:
        assert (gift, Level.L5) in await HistoryRepository(session).get_user_history(1)

    assert await services.collection.archive_items() == 1
    assert await get_items(db, 2) == []
