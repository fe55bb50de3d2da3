import pytest

from mergeverse.database.models import Level
from mergeverse.utils.exceptions import ErrorKind, ServiceError

from tests.helpers import ADMIN_ID, make_init_data, make_user, give_item, get_user


async def test_authenticate_registers_user(db, services):
    user = await services.users.authenticate(make_init_data(42, "alice"))

    assert user.user_id == 42
    assert user.user_name == "alice"
    assert user.user_fullname == "Test"
    assert user.referred_by is None

    again = await services.users.authenticate(make_init_data(42, "alice_renamed"))
    assert again.id == user.id
    assert (await get_user(db, 42)).user_name == "alice_renamed"


async def test_referrer_linked_on_first_visit_only(db, services):
    await make_user(db, 7)

    user = await services.users.authenticate(make_init_data(42, start_param="7"))
    assert user.referred_by == 7

    await make_user(db, 8)
    user = await services.users.authenticate(make_init_data(42, start_param="8"))
    assert user.referred_by == 7


@pytest.mark.parametrize("start_param", ["999", "42", "promo"])
async def test_unknown_or_self_referrer_is_ignored(services, start_param):
    user = await services.users.authenticate(make_init_data(42, start_param=start_param))
    assert user.referred_by is None


async def test_banned_user_is_rejected(db, services):
    await make_user(db, 42, banned=True)
    with pytest.raises(ServiceError) as exc:
        await services.users.authenticate(make_init_data(42))
    assert exc.value.kind == ErrorKind.FORBIDDEN

    await services.admin.set_user_ban(42, False)
    assert (await services.users.authenticate(make_init_data(42))).banned is False


async def test_admin_cannot_be_banned(db, services):
    await make_user(db, ADMIN_ID)
    with pytest.raises(ServiceError) as exc:
        await services.admin.set_user_ban(ADMIN_ID, True)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert exc.value.message == "Cannot ban admin users"
    assert (await get_user(db, ADMIN_ID)).banned is False


async def test_profile_and_referral_link(db, services):
    await make_user(db, 7)
    assert (await services.users.profile(7)).user_name == "user7"
    assert services.users.referral_link(7) == f"https://t.me/{services.users.bot_username}?startapp=7"


async def test_profile_of_unknown_user(services):
    with pytest.raises(ServiceError) as exc:
        await services.users.profile(1)
    assert exc.value.kind == ErrorKind.NOT_FOUND


async def test_collection_history(db, services):
    await make_user(db, 1)
    gift = services.catalog.gifts[0].id
    stack = await give_item(db, 1, gift, Level.L1, quantity=2)
    await services.crafting.craft(1, stack.id, stack.id)

    history = await services.users.collection_history(1)

    assert [row["gift"].rarity.value for row in history] == ["COMMON", "RARE", "EPIC", "LEGENDARY", "MYTHIC"]
    levels = {cell["level"]: cell["owned"] for cell in history[0]["levels"]}
    assert Level.L0 not in levels
    assert levels[Level.L2] is True
    assert levels[Level.L1] is False
    assert not any(cell["owned"] for row in history[1:] for cell in row["levels"])

    inventory = await services.users.inventory(1)
    assert [(i.level, i.quantity) for i in inventory] == [(Level.L2, 1)]
