from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import CryptoWalletRequest
from mergeverse.database.models import User
from mergeverse.services import Services

router = APIRouter(prefix="/user", tags=["user"])


@router.get("")
async def profile(user: User = Depends(current_user), services: Services = Depends(get_services)):
    row = await services.users.profile(user.user_id)
    return {**serializers.user(row), "referral_link": services.users.referral_link(row.user_id)}


@router.post("/crypto-wallet")
async def set_crypto_wallet(body: CryptoWalletRequest, user: User = Depends(current_user),
                            services: Services = Depends(get_services)):
    row = await services.users.set_crypto_wallet(user.user_id, body.crypto_wallet)
    return {"crypto_wallet": row.crypto_wallet}


@router.get("/inventory")
async def inventory(user: User = Depends(current_user), services: Services = Depends(get_services)):
    items = await services.users.inventory(user.user_id)
    return {"items": [serializers.item(i, services.catalog) for i in items]}


@router.get("/collection/history")
async def collection_history(user: User = Depends(current_user), services: Services = Depends(get_services)):
    rows = await services.users.collection_history(user.user_id)
    return {
        "history": [
            {"gift": serializers.gift(row["gift"]), "levels": row["levels"]}
            for row in rows
        ]
    }
