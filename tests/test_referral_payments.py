from decimal import Decimal

import pytest

from mergeverse.database.models import PaymentStatus, PayoutStatus, ReferralSettingsName, ValueType
from mergeverse.database.repositories import PaymentRepository, PayoutRepository
from mergeverse.services.payment_service import nowpayments_signature
from mergeverse.utils.exceptions import ErrorKind, ServiceError

from tests.helpers import IPN_KEY, make_user, get_user


def signed(payload: dict) -> tuple[dict, str]:
    return payload, nowpayments_signature(payload, IPN_KEY)


@pytest.fixture
async def chain(db):
    await make_user(db, 20)
    await make_user(db, 10, referred_by=20)
    await make_user(db, 1, referred_by=10)


def test_signature_is_key_order_independent():
    a = nowpayments_signature({"b": 1, "a": {"y": 2, "x": 1}}, IPN_KEY)
    b = nowpayments_signature({"a": {"x": 1, "y": 2}, "b": 1}, IPN_KEY)
    assert a == b
    assert a != nowpayments_signature({"a": {"x": 1, "y": 2}, "b": 1}, "other")


async def test_create_deposit(db, services, chain):
    result = await services.payments.create_deposit(1, Decimal('100'))
    assert result["amount"] == Decimal('100.00')
    assert result["price_amount"] == Decimal('101.01')

    async with db.get_session() as session:
        payment = await PaymentRepository(session).get(result["order_id"])
    assert payment.status == PaymentStatus.PENDING


async def test_create_deposit_validation(services, chain):
    with pytest.raises(ServiceError) as exc:
        await services.payments.create_deposit(1, 0)
    assert exc.value.kind == ErrorKind.INVALID_STATE

    with pytest.raises(ServiceError) as exc:
        await services.payments.create_deposit(404, 10)
    assert exc.value.kind == ErrorKind.NOT_FOUND


async def test_finished_notification_credits_once(db, services, chain):
    order = await services.payments.create_deposit(1, Decimal('100'))
    payload, signature = signed({"payment_id": 5077125051, "payment_status": "finished",
                                 "order_id": str(order["order_id"]), "price_amount": 101.01})

    result = await services.payments.process_notification(payload, signature)

    assert result["status"] == "completed"
    assert result["balance"] == Decimal('100.00')
    assert (await get_user(db, 10)).balance == Decimal('4.00')
    assert (await get_user(db, 20)).balance == Decimal('2.00')

    again = await services.payments.process_notification(payload, signature)
    assert again == {"status": "already_processed"}
    assert (await get_user(db, 1)).balance == Decimal('100.00')
    assert (await get_user(db, 10)).balance == Decimal('4.00')

    async with db.get_session() as session:
        payment = await PaymentRepository(session).get(order["order_id"])
    assert payment.status == PaymentStatus.COMPLETED
    assert payment.external_id == "5077125051"


async def test_notification_rejections(db, services, chain):
    order = await services.payments.create_deposit(1, Decimal('10'))
    payload = {"payment_status": "finished", "order_id": order["order_id"]}

    with pytest.raises(ServiceError) as exc:
        await services.payments.process_notification(payload, "bad-signature")
    assert exc.value.kind == ErrorKind.FORBIDDEN

    with pytest.raises(ServiceError) as exc:
        await services.payments.process_notification(payload, None)
    assert exc.value.kind == ErrorKind.FORBIDDEN

    waiting, signature = signed({"payment_status": "waiting", "order_id": order["order_id"]})
    assert await services.payments.process_notification(waiting, signature) == {"status": "ignored"}

    missing, signature = signed({"payment_status": "finished", "order_id": 9999})
    with pytest.raises(ServiceError) as exc:
        await services.payments.process_notification(missing, signature)
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert (await get_user(db, 1)).balance == Decimal('0.00')


async def test_deposit_without_referrer(db, services):
    await make_user(db, 5)
    order = await services.payments.create_deposit(5, Decimal('50'))
    payload, signature = signed({"payment_status": "finished", "order_id": order["order_id"]})

    await services.payments.process_notification(payload, signature)
    assert (await get_user(db, 5)).balance == Decimal('50.00')


async def test_referral_rule_update(db, services, chain):
    await services.admin.update_referral_setting(
        ReferralSettingsName.REFERRAL_FIRST_LEVEL, ValueType.FIXED, Decimal('5'),
    )
    assert services.referrals.first_level_commission(Decimal('1000')) == Decimal('5.00')

    async with db.transaction() as session:
        credited = await services.referrals.deposit_commissions(session, 1, Decimal('1000'))
    assert credited == [(10, Decimal('5.00')), (20, Decimal('20.00'))]

    with pytest.raises(ServiceError) as exc:
        await services.admin.update_referral_setting(
            ReferralSettingsName.REFERRAL_SECOND_LEVEL, ValueType.PERCENTAGE, Decimal('0'),
        )
    assert exc.value.kind == ErrorKind.INVALID_STATE


async def test_percentage_commission_rounding(services):
    assert services.referrals.first_level_commission(Decimal('0.10')) == Decimal('0.00')
    assert services.referrals.second_level_commission(Decimal('12.34')) == Decimal('0.25')
    assert services.referrals.full_collection_bonus() == Decimal('22.50')


WALLET = "TQn9Y2khEsLJW1ChVWFMSMeRDow5KcbLSE"


async def get_payout(db, payout_id):
    async with db.get_session() as session:
        return await PayoutRepository(session).get(payout_id)


async def test_payout_requires_wallet_and_balance(db, services):
    await make_user(db, 1, balance=100)

    with pytest.raises(ServiceError) as exc:
        await services.payments.request_payout(1, Decimal('47'))
    assert exc.value.kind == ErrorKind.INVALID_STATE

    with pytest.raises(ServiceError) as exc:
        await services.users.set_crypto_wallet(1, "short")
    assert exc.value.kind == ErrorKind.INVALID_STATE

    await services.users.set_crypto_wallet(1, f"  {WALLET} ")
    assert (await get_user(db, 1)).crypto_wallet == WALLET

    with pytest.raises(ServiceError) as exc:
        await services.payments.request_payout(1, Decimal('95'))
    assert exc.value.kind == ErrorKind.INSUFFICIENT_RESOURCE
    assert (await get_user(db, 1)).balance == Decimal('100.00')


async def test_failed_payout_refunds_once(db, services):
    await make_user(db, 1, balance=100, crypto_wallet=WALLET)

    result = await services.payments.request_payout(1, Decimal('47'))
    assert result["total_amount"] == Decimal('50.00')
    assert result["balance"] == Decimal('50.00')
    payout = await get_payout(db, result["payout_id"])
    assert payout.status == PayoutStatus.PROCESSING
    assert payout.wallet == WALLET

    payload, signature = signed({"id": 5001, "status": "FAILED", "unique_external_id": str(payout.id)})
    response = await services.payments.process_payout_notification(payload, signature)
    assert response == {"status": "refunded", "balance": Decimal('100.00')}

    # повтор уведомления не возвращает деньги второй раз
    response = await services.payments.process_payout_notification(payload, signature)
    assert response == {"status": "already_processed"}
    assert (await get_user(db, 1)).balance == Decimal('100.00')
    assert (await get_payout(db, payout.id)).status == PayoutStatus.FAILED


async def test_finished_payout_completes_once(db, services):
    await make_user(db, 1, balance=100, crypto_wallet=WALLET)
    result = await services.payments.request_payout(1, Decimal('47'))
    payout_id = str(result["payout_id"])

    payload, signature = signed({"id": 5002, "status": "sending", "unique_external_id": payout_id})
    assert await services.payments.process_payout_notification(payload, signature) == {"status": "ignored"}

    payload, signature = signed({"id": 5002, "status": "finished", "unique_external_id": payout_id})
    assert await services.payments.process_payout_notification(payload, signature) == {"status": "completed"}

    failed, failed_signature = signed({"id": 5002, "status": "failed", "unique_external_id": payout_id})
    assert await services.payments.process_payout_notification(failed, failed_signature) == {
        "status": "already_processed"
    }

    payout = await get_payout(db, result["payout_id"])
    assert payout.status == PayoutStatus.COMPLETED
    assert payout.external_id == "5002"
    assert (await get_user(db, 1)).balance == Decimal('50.00')


async def test_payout_notification_rejections(db, services):
    payload = {"id": 1, "status": "finished", "unique_external_id": "1"}
    with pytest.raises(ServiceError) as exc:
        await services.payments.process_payout_notification(payload, "bad")
    assert exc.value.kind == ErrorKind.FORBIDDEN

    with pytest.raises(ServiceError) as exc:
        await services.payments.process_payout_notification(*signed(payload))
    assert exc.value.kind == ErrorKind.NOT_FOUND

    with pytest.raises(ServiceError) as exc:
        await services.payments.process_payout_notification(*signed({"id": 1, "status": "finished"}))
    assert exc.value.kind == ErrorKind.INVALID_STATE
