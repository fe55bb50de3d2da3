import hashlib
import hmac
import json
import config

from decimal import Decimal

from mergeverse.logger import logger
from mergeverse.database.models import PaymentStatus, PayoutStatus
from mergeverse.database.repositories import PaymentRepository, PayoutRepository, UserRepository
from mergeverse.utils.exceptions import forbidden, invalid_state, not_found
from mergeverse.utils.misc_function import to_money


def nowpayments_signature(payload: dict, ipn_key: str) -> str:
    """HMAC-SHA512 по компактному JSON с рекурсивно отсортированными ключами."""
    message = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hmac.new(ipn_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha512).hexdigest()


class PaymentService:
    def __init__(self, db, referrals, ipn_key: str = config.NOWPAYMENTS_IPN_KEY,
                 fee_divisor: float = config.DEPOSIT_FEE_DIVISOR,
                 payout_fee_divisor: float = config.PAYOUT_FEE_DIVISOR):
        self.db = db
        self.referrals = referrals
        self.ipn_key = ipn_key
        self.fee_divisor = Decimal(str(fee_divisor))
        self.payout_fee_divisor = Decimal(str(payout_fee_divisor))

    async def create_deposit(self, user_id: int, amount) -> dict:
        amount = to_money(amount)
        if amount <= 0:
            raise invalid_state("Deposit amount must be positive")
        price_amount = to_money(amount / self.fee_divisor)

        async with self.db.transaction() as session:
            if not await UserRepository(session).get_user(user_id):
                raise not_found(f"User {user_id} not found")
            payment = await PaymentRepository(session).create(
                user_id=user_id,
                amount=amount,
                price_amount=price_amount,
                status=PaymentStatus.PENDING,
            )

        logger.info(f"Deposit {payment.id} created for {user_id}: {amount} (price {price_amount})")
        return {"order_id": payment.id, "amount": amount, "price_amount": price_amount}

    def verify_signature(self, payload: dict, signature: str | None) -> bool:
        if not self.ipn_key or not signature:
            return False
        return hmac.compare_digest(nowpayments_signature(payload, self.ipn_key), signature)

    async def process_notification(self, payload: dict, signature: str | None) -> dict:
        if not self.verify_signature(payload, signature):
            raise forbidden("Invalid signature")

        status = payload.get("payment_status")
        if status != "finished":
            logger.info(f"NOWPayments notification for order {payload.get('order_id')}: {status}")
            return {"status": "ignored"}

        try:
            order_id = int(payload.get("order_id"))
        except (TypeError, ValueError):
            raise invalid_state("Invalid order_id")

        async with self.db.transaction() as session:
            payment = await PaymentRepository(session).get(order_id, for_update=True)
            if not payment:
                raise not_found(f"Payment {order_id} not found")
            if payment.status == PaymentStatus.COMPLETED:
                return {"status": "already_processed"}

            payment.status = PaymentStatus.COMPLETED
            if payload.get("payment_id") is not None:
                payment.external_id = str(payload["payment_id"])
            balance = await UserRepository(session).credit(payment.user_id, payment.amount)
            commissions = await self.referrals.deposit_commissions(session, payment.user_id, payment.amount)

        logger.info(f"Deposit {order_id} completed: {payment.amount} credited to {payment.user_id}, "
                    f"referrals={commissions}")
        return {"status": "completed", "balance": balance}

    async def request_payout(self, user_id: int, amount) -> dict:
        """
        Списывает сумму вывода вместе с комиссией провайдера и ставит выплату в PROCESSING.
        Деньги возвращаются, только если провайдер пришлёт failed.
        """
        amount = to_money(amount)
        if amount <= 0:
            raise invalid_state("Payout amount must be positive")
        total_amount = to_money(amount / self.payout_fee_divisor)

        async with self.db.transaction() as session:
            user_repo = UserRepository(session)
            user = await user_repo.get_user(user_id)
            if not user:
                raise not_found(f"User {user_id} not found")
            if not user.crypto_wallet:
                raise invalid_state("Crypto wallet not found")

            balance = await user_repo.charge(user_id, total_amount)
            payout = await PayoutRepository(session).create(
                user_id=user_id,
                amount=amount,
                total_amount=total_amount,
                wallet=user.crypto_wallet,
                status=PayoutStatus.PROCESSING,
            )

        logger.info(f"Payout {payout.id} requested by {user_id}: {amount} (charged {total_amount})")
        return {"payout_id": payout.id, "amount": amount, "total_amount": total_amount, "balance": balance}

    async def process_payout_notification(self, payload: dict, signature: str | None) -> dict:
        if not self.verify_signature(payload, signature):
            raise forbidden("Invalid signature")

        status = str(payload.get("status") or "").lower()
        if status not in ("finished", "failed"):
            logger.info(f"NOWPayments payout {payload.get('unique_external_id')}: {status}")
            return {"status": "ignored"}

        try:
            payout_id = int(payload.get("unique_external_id"))
        except (TypeError, ValueError):
            raise invalid_state("Missing unique_external_id")

        async with self.db.transaction() as session:
            payout = await PayoutRepository(session).get(payout_id, for_update=True)
            if not payout:
                raise not_found(f"Payout {payout_id} not found")
            if payout.status != PayoutStatus.PROCESSING:
                return {"status": "already_processed"}

            if payload.get("id") is not None:
                payout.external_id = str(payload["id"])

            if status == "failed":
                payout.status = PayoutStatus.FAILED
                balance = await UserRepository(session).credit(payout.user_id, payout.total_amount)
                logger.warning(f"Payout {payout_id} failed, refunded {payout.total_amount} to {payout.user_id}")
                return {"status": "refunded", "balance": balance}

            payout.status = PayoutStatus.COMPLETED

        logger.info(f"Payout {payout_id} completed for {payout.user_id}: {payout.amount}")
        return {"status": "completed"}
