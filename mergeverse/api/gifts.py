from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.database.models import PAID_LEVELS
from mergeverse.services import Services

router = APIRouter(prefix="/gift", tags=["gift"], dependencies=[Depends(current_user)])


@router.get("")
async def all_gifts(services: Services = Depends(get_services)):
    return {"gifts": [serializers.gift(g) for g in services.catalog.gifts]}


@router.get("/{gift_id}")
async def get_gift(gift_id: int, services: Services = Depends(get_services)):
    info = services.catalog.get_gift(gift_id)
    prices = services.catalog.snapshot.prices
    return {
        **serializers.gift(info),
        "prices": {level.value: prices.get((info.rarity, level)) for level in PAID_LEVELS},
    }
