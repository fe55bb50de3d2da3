import httpx
import pytest

from mergeverse.database.models import Level
from mergeverse.services.payment_service import nowpayments_signature

from webapp import create_app

from tests.helpers import ADMIN_ID, IPN_KEY, make_init_data, make_user, give_item, gift_id


@pytest.fixture
async def client(services):
    transport = httpx.ASGITransport(app=create_app(services))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


def auth(user_id: int, **kwargs) -> dict:
    return {"X-Telegram-Init-Data": make_init_data(user_id, **kwargs)}


async def test_healthz(client):
    response = await client.get("/healthz")
    assert response.json() == {"status": "ok"}


async def test_missing_init_data_is_unauthorized(client):
    response = await client.get("/user")
    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"

    response = await client.get("/user", headers={"X-Telegram-Init-Data": "user=1&hash=abc"})
    assert response.status_code == 401


async def test_profile_registers_user(client):
    response = await client.get("/user", headers=auth(42, username="alice"))
    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == 42
    assert body["user_name"] == "alice"
    assert float(body["balance"]) == 0
    assert body["referral_link"].endswith("?startapp=42")


async def test_banned_user_is_forbidden(db, client):
    await make_user(db, 42, banned=True)
    response = await client.get("/user/inventory", headers=auth(42))
    assert response.status_code == 403
    assert response.json() == {"error": "FORBIDDEN", "message": "User is banned"}


async def test_catalog_endpoints(client, services):
    response = await client.get("/gift", headers=auth(1))
    assert response.status_code == 200
    assert len(response.json()["gifts"]) == len(services.catalog.gifts)

    response = await client.get("/gift/99999", headers=auth(1))
    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"

    response = await client.get("/pack/paid")
    assert [p["type"] for p in response.json()["packs"]][0] == "COMMON_PACK"


async def test_craft_and_inventory(db, client, services):
    await make_user(db, 1)
    stack = await give_item(db, 1, gift_id(services, 'Sharp Tongue'), Level.L1, quantity=2)

    response = await client.post("/collection/craft", json={"item1_id": stack.id, "item2_id": stack.id},
                                 headers=auth(1))
    assert response.status_code == 200
    assert response.json()["item"]["level"] == "L2"

    inventory = (await client.get("/user/inventory", headers=auth(1))).json()["items"]
    assert [(i["gift"]["name"], i["level"], i["quantity"]) for i in inventory] == [("Sharp Tongue", "L2", 1)]

    response = await client.post("/collection/craft", json={"item1_id": stack.id, "item2_id": stack.id},
                                 headers=auth(1))
    assert response.status_code == 404


async def test_insufficient_funds_maps_to_400(db, client):
    await make_user(db, 1)
    response = await client.post("/pack/buy", json={"pack_type": "RARE_PACK"}, headers=auth(1))
    assert response.status_code == 400
    assert response.json()["error"] == "INSUFFICIENT_RESOURCE"


async def test_free_pack_twice(db, client):
    response = await client.post("/pack/free", headers=auth(1))
    assert response.status_code == 200
    assert response.json()["streak"] == 1

    response = await client.post("/pack/free", headers=auth(1))
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_STATE"


async def test_auction_endpoints(db, client, services):
    await make_user(db, 1)
    await make_user(db, 2, balance=100)
    item = await give_item(db, 1, gift_id(services, 'Sharp Tongue'), Level.L1)

    created = await client.post("/auction", json={"item_id": item.id}, headers=auth(1))
    assert created.status_code == 200
    auction_id = created.json()["id"]
    assert float(created.json()["start"]) == 12.0

    bid = await client.post("/auction/bid", json={"auction_id": auction_id, "amount": "13.50"}, headers=auth(2))
    assert bid.status_code == 200

    detail = (await client.get(f"/auction/{auction_id}")).json()
    assert [b["user_id"] for b in detail["bids"]] == [2]

    forbidden = await client.post("/auction/finish", json={"auction_id": auction_id}, headers=auth(2))
    assert forbidden.status_code == 403

    finished = await client.post("/auction/finish", json={"auction_id": auction_id}, headers=auth(1))
    assert finished.json()["status"] == "FINISHED"


async def test_admin_routes_require_admin(client):
    response = await client.get("/admin/giveaway-steps", headers=auth(1))
    assert response.status_code == 403

    response = await client.get("/admin/giveaway-steps", headers=auth(ADMIN_ID))
    assert response.status_code == 200
    assert response.json() == {"steps": 30}


async def test_admin_settings(client, services):
    headers = auth(ADMIN_ID)

    response = await client.patch("/admin/giveaway-steps", json={"steps": 3}, headers=headers)
    assert response.json() == {"steps": 3}
    assert services.catalog.giveaway_steps == 3

    response = await client.patch("/admin/collection-visible", json={"is_visible": False}, headers=headers)
    assert response.json() == {"is_visible": False}
    response = await client.get("/collection", headers=headers)
    assert response.status_code == 403

    response = await client.patch("/admin/referral-settings",
                                  json={"name": "REFERRAL_FIRST_LEVEL", "type": "FIXED", "value": "1.5"},
                                  headers=headers)
    assert response.status_code == 200
    assert response.json()["REFERRAL_FIRST_LEVEL"]["type"] == "FIXED"


async def test_admin_monthly_giveaways(client, services):
    headers = auth(ADMIN_ID)
    response = await client.post("/admin/giveaway/monthly", headers=headers)
    assert response.status_code == 200
    assert len(response.json()["giveaways"]) == len(services.catalog.gifts)

    listed = (await client.get("/giveaway")).json()["giveaways"]
    assert len(listed) == len(services.catalog.gifts)


async def test_payment_notification(db, client):
    await make_user(db, 1)
    order = (await client.post("/payment/deposit", json={"amount": "25"}, headers=auth(1))).json()

    payload = {"payment_status": "finished", "order_id": order["order_id"]}
    response = await client.post("/payment/nowpayment/notification", json=payload,
                                 headers={"x-nowpayments-sig": "forged"})
    assert response.status_code == 403

    response = await client.post("/payment/nowpayment/notification", json=payload,
                                 headers={"x-nowpayments-sig": nowpayments_signature(payload, IPN_KEY)})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert float(response.json()["balance"]) == 25.0


async def test_payout_endpoints(db, client):
    await make_user(db, 1, balance=100)

    response = await client.post("/payment/payout", json={"amount": "47"}, headers=auth(1))
    assert response.status_code == 400

    response = await client.post("/user/crypto-wallet", json={"crypto_wallet": "abc"}, headers=auth(1))
    assert response.status_code == 422

    wallet = "TQn9Y2khEsLJW1ChVWFMSMeRDow5KcbLSE"
    response = await client.post("/user/crypto-wallet", json={"crypto_wallet": wallet}, headers=auth(1))
    assert response.json() == {"crypto_wallet": wallet}

    payout = (await client.post("/payment/payout", json={"amount": "47"}, headers=auth(1))).json()
    assert float(payout["balance"]) == 50.0

    payload = {"id": 77, "status": "failed", "unique_external_id": str(payout["payout_id"])}
    headers = {"x-nowpayments-sig": nowpayments_signature(payload, IPN_KEY)}
    response = await client.post("/payment/nowpayment/payout/notification", json=payload, headers=headers)
    assert response.json()["status"] == "refunded"

    response = await client.post("/payment/nowpayment/payout/notification", json=payload, headers=headers)
    assert response.json() == {"status": "already_processed"}


async def test_admin_cannot_ban_admin(client):
    headers = auth(ADMIN_ID)
    response = await client.patch("/admin/user/ban", json={"user_id": ADMIN_ID, "banned": True}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "INVALID_STATE", "message": "Cannot ban admin users"}


async def test_unhandled_error_is_masked(client, services, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(services.catalog, "reload", boom)
    response = await client.post("/admin/reload", headers=auth(ADMIN_ID))
    assert response.status_code == 500
    assert response.json() == {"error": "INTERNAL", "message": "Internal server error"}
