from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytz

from mergeverse.database.models import GiveawayStatus, Level, PackType, WinnerChoice
from mergeverse.database.repositories import GiveawayRepository, CompensationRepository
from mergeverse.utils.exceptions import ErrorKind, ServiceError
from mergeverse.utils.misc_function import get_time_now

from tests.helpers import FakeNotifier, make_user, give_item, get_items, gift_id


async def open_giveaway(db, gift, status=GiveawayStatus.ACTIVE):
    now = get_time_now()
    async with db.transaction() as session:
        return await GiveawayRepository(session).create(
            gift_id=gift,
            status=status,
            start_at=now - timedelta(days=1),
            ends_at=now + timedelta(days=1),
        )


async def enter_users(db, services, giveaway, user_ids, is_tradeable=True):
    for user_id in user_ids:
        await make_user(db, user_id)
        await give_item(db, user_id, giveaway.gift_id, Level.L10, is_tradeable=is_tradeable)
        await services.giveaways.enter_giveaway(user_id, giveaway.id)


async def compensations(db, user_id):
    async with db.get_session() as session:
        rows = await CompensationRepository(session).get_user_compensations(user_id)
    return {(row.pack_type, row.amount) for row in rows}


@pytest.fixture
async def giveaway(db, services):
    return await open_giveaway(db, gift_id(services, 'Sharp Tongue'))


async def test_enter_consumes_max_level_item(db, services, giveaway):
    await make_user(db, 1)
    await give_item(db, 1, giveaway.gift_id, Level.L10, is_tradeable=True)
    await give_item(db, 1, giveaway.gift_id, Level.L10, is_tradeable=False)

    entry = await services.giveaways.enter_giveaway(1, giveaway.id)

    assert entry.is_tradeable is False
    items = await get_items(db, 1)
    assert [(i.level, i.is_tradeable) for i in items] == [(Level.L10, True)]
    assert [e.id for e in await services.giveaways.user_entries(1)] == [entry.id]


async def test_enter_twice(db, services, giveaway):
    await make_user(db, 1)
    await give_item(db, 1, giveaway.gift_id, Level.L10, quantity=2)
    await services.giveaways.enter_giveaway(1, giveaway.id)

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.enter_giveaway(1, giveaway.id)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert (await get_items(db, 1))[0].quantity == 1


async def test_enter_requires_item(db, services, giveaway):
    await make_user(db, 1)
    await give_item(db, 1, giveaway.gift_id, Level.L9)
    await give_item(db, 1, gift_id(services, 'Bonded Ring'), Level.L10)

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.enter_giveaway(1, giveaway.id)
    assert exc.value.kind == ErrorKind.INSUFFICIENT_RESOURCE


async def test_enter_inactive_giveaway(db, services):
    pending = await open_giveaway(db, gift_id(services, 'Sharp Tongue'), GiveawayStatus.PENDING)
    await make_user(db, 1)
    await give_item(db, 1, pending.gift_id, Level.L10)

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.enter_giveaway(1, pending.id)
    assert exc.value.kind == ErrorKind.INVALID_STATE

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.enter_giveaway(1, 9999)
    assert exc.value.kind == ErrorKind.NOT_FOUND


async def test_finish_below_quorum_refunds_entries(db, services, notifier, giveaway):
    await enter_users(db, services, giveaway, [1], is_tradeable=True)
    await enter_users(db, services, giveaway, [2], is_tradeable=False)

    result = await services.giveaways.finish_giveaway(giveaway.id)

    assert result["status"] == GiveawayStatus.CANCELLED
    assert result["winners"] == []
    assert [(i.level, i.is_tradeable) for i in await get_items(db, 1)] == [(Level.L10, True)]
    assert [(i.level, i.is_tradeable) for i in await get_items(db, 2)] == [(Level.L10, False)]
    assert await compensations(db, 1) == {(PackType.COMMON_PACK, 3)}
    assert await compensations(db, 2) == {(PackType.COMMON_PACK, 3)}
    assert notifier.sent == []


async def test_finish_with_quorum_picks_winners(db, services, notifier, giveaway):
    await services.giveaways.update_steps(2)
    await enter_users(db, services, giveaway, [1, 2, 3])

    result = await services.giveaways.finish_giveaway(giveaway.id)

    assert result["status"] == GiveawayStatus.FINISHED
    assert result["entries"] == 3
    winners = result["winners"]
    assert len(winners) == 2
    assert len({w.user_id for w in winners}) == 2
    assert all(w.choice == WinnerChoice.PENDING for w in winners)
    assert sorted(s[0] for s in notifier.sent) == sorted(w.user_id for w in winners)
    for user_id in (1, 2, 3):
        assert await get_items(db, user_id) == []
        assert await compensations(db, user_id) == {(PackType.COMMON_PACK, 3)}

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.finish_giveaway(giveaway.id)
    assert exc.value.kind == ErrorKind.INVALID_STATE


async def test_notification_failure_does_not_break_settlement(db, services, giveaway):
    services.giveaways.notifier = FakeNotifier(fail=True)
    await services.giveaways.update_steps(1)
    await enter_users(db, services, giveaway, [1])

    result = await services.giveaways.finish_giveaway(giveaway.id)

    assert result["status"] == GiveawayStatus.FINISHED
    assert [w.user_id for w in result["winners"]] == [1]


async def test_finish_expired(db, services, giveaway):
    async with db.transaction() as session:
        row = await GiveawayRepository(session).get(giveaway.id, for_update=True)
        row.ends_at = get_time_now() - timedelta(minutes=5)

    assert await services.giveaways.finish_expired() == 1
    assert await services.giveaways.finish_expired() == 0
    assert (await services.giveaways.list_giveaways(GiveawayStatus.CANCELLED))[0].id == giveaway.id


async def test_create_monthly_is_idempotent(services):
    now = datetime(2025, 5, 17, 12, 0, tzinfo=pytz.UTC)
    created = await services.giveaways.create_monthly(now)

    assert len(created) == len(services.catalog.gifts)
    assert {g.status for g in created} == {GiveawayStatus.ACTIVE}
    assert await services.giveaways.create_monthly(now) == []


async def test_create_monthly_before_start_is_pending(services):
    created = await services.giveaways.create_monthly(datetime(2025, 6, 1, 12, 0, tzinfo=pytz.UTC))
    assert {g.status for g in created} == {GiveawayStatus.PENDING}

    assert await services.giveaways.activate_pending() == len(created)
    assert len(await services.giveaways.list_giveaways(GiveawayStatus.ACTIVE)) == len(created)


async def test_prize_choice_and_admin_finish(db, services, giveaway):
    await services.giveaways.update_steps(1)
    await enter_users(db, services, giveaway, [1])
    winner = (await services.giveaways.finish_giveaway(giveaway.id))["winners"][0]

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.mark_winner_finished(winner.id)
    assert exc.value.kind == ErrorKind.INVALID_STATE

    with pytest.raises(ServiceError) as exc:
        await services.giveaways.choose_prize(2, winner.id, WinnerChoice.GIFT)
    assert exc.value.kind == ErrorKind.NOT_FOUND

    chosen = await services.giveaways.choose_prize(1, winner.id, WinnerChoice.COMPENSATION)
    assert chosen.choice == WinnerChoice.COMPENSATION
    with pytest.raises(ServiceError):
        await services.giveaways.choose_prize(1, winner.id, WinnerChoice.GIFT)

    assert [w.id for w in await services.giveaways.pending_choices()] == [winner.id]
    finished = await services.giveaways.mark_winner_finished(winner.id)
    assert finished.is_finished is True
    assert await services.giveaways.pending_choices() == []


async def test_top_winners(db, services, giveaway):
    await services.giveaways.update_steps(1)
    await enter_users(db, services, giveaway, [1])
    await services.giveaways.finish_giveaway(giveaway.id)

    top = await services.giveaways.top_winners()
    assert len(top) == 1
    assert top[0]["user_id"] == 1
    assert top[0]["user_name"] == "user1"
    assert top[0]["wins"] == 1
    assert top[0]["winnings"] == Decimal('5120')

    details = await services.giveaways.get_giveaway(giveaway.id)
    assert details["entries"] == 1
    assert details["steps"] == 1
    assert [w.user_id for w in details["winners"]] == [1]


async def test_update_steps_validation(services):
    with pytest.raises(ServiceError) as exc:
        await services.giveaways.update_steps(0)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert services.catalog.giveaway_steps == 30
