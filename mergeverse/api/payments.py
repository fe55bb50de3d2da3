from fastapi import APIRouter, Body, Depends, Header

from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import DepositRequest, PayoutRequest
from mergeverse.database.models import User
from mergeverse.services import Services

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("/deposit")
async def create_deposit(body: DepositRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    return await services.payments.create_deposit(user.user_id, body.amount)


@router.post("/payout")
async def request_payout(body: PayoutRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    return await services.payments.request_payout(user.user_id, body.amount)


@router.post("/nowpayment/notification")
async def nowpayment_notification(
    payload: dict = Body(...),
    signature: str | None = Header(default=None, alias="x-nowpayments-sig"),
    services: Services = Depends(get_services),
):
    return await services.payments.process_notification(payload, signature)


@router.post("/nowpayment/payout/notification")
async def nowpayment_payout_notification(
    payload: dict = Body(...),
    signature: str | None = Header(default=None, alias="x-nowpayments-sig"),
    services: Services = Depends(get_services),
):
    return await services.payments.process_payout_notification(payload, signature)
