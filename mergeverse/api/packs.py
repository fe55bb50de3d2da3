from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import BuyPackRequest
from mergeverse.database.models import User
from mergeverse.services import Services

router = APIRouter(prefix="/pack", tags=["pack"])


@router.post("/free")
async def claim_free_pack(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return serializers.pack_result(await services.packs.claim_free_pack(user.user_id))


@router.get("/paid")
async def paid_packs(services: Services = Depends(get_services)):
    return {"packs": [serializers.pack_config(p) for p in services.packs.list_paid_packs()]}


@router.post("/buy")
async def buy_pack(body: BuyPackRequest, user: User = Depends(current_user),
                   services: Services = Depends(get_services)):
    return serializers.pack_result(await services.packs.buy_pack(user.user_id, body.pack_type))


@router.get("/compensations")
async def compensations(user: User = Depends(current_user), services: Services = Depends(get_services)):
    rows = await services.packs.list_compensations(user.user_id)
    return {"compensations": [serializers.compensation(c) for c in rows]}


@router.post("/compensations/{compensation_id}/open")
async def open_compensation(compensation_id: int, user: User = Depends(current_user),
                            services: Services = Depends(get_services)):
    return serializers.pack_result(await services.packs.open_compensation(user.user_id, compensation_id))
