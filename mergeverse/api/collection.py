from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import (CraftRequest, VerticalPrizeRequest, HorizontalPrizeRequest,
                                    MoveToTableRequest, RemoveFromTableRequest)
from mergeverse.database.models import User
from mergeverse.services import Services

router = APIRouter(prefix="/collection", tags=["collection"])


@router.get("")
async def get_collection(user: User = Depends(current_user), services: Services = Depends(get_services)):
    items = await services.collection.get_collection(user.user_id)
    return {"collection": [serializers.item(i, services.catalog) for i in items]}


@router.get("/check")
async def check_collection(user: User = Depends(current_user), services: Services = Depends(get_services)):
    result = await services.collection.check_collection(user.user_id)
    for row in result["horizontal"]:
        row["gift"] = serializers.gift(row["gift"])
    return result


@router.post("/craft")
async def craft(body: CraftRequest, user: User = Depends(current_user), services: Services = Depends(get_services)):
    item = await services.crafting.craft(user.user_id, body.item1_id, body.item2_id)
    return {"item": serializers.item(item, services.catalog)}


@router.post("/vertical")
async def vertical_prize(body: VerticalPrizeRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    return await services.collection.claim_vertical(user.user_id, body.level)


@router.post("/horizontal")
async def horizontal_prize(body: HorizontalPrizeRequest, user: User = Depends(current_user),
                           services: Services = Depends(get_services)):
    return await services.collection.claim_horizontal(user.user_id, body.gift_id)


@router.post("/full")
async def full_prize(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return await services.collection.claim_full(user.user_id)


@router.get("/table")
async def craft_table(user: User = Depends(current_user), services: Services = Depends(get_services)):
    table = await services.crafting.get_table(user.user_id)
    return {"size": table["size"], "items": [serializers.craft_item(c, services.catalog) for c in table["items"]]}


@router.post("/table/move")
async def move_to_table(body: MoveToTableRequest, user: User = Depends(current_user),
                        services: Services = Depends(get_services)):
    craft_item = await services.crafting.move_to_table(user.user_id, body.item_id, body.x, body.y)
    return {"craft_item": serializers.craft_item(craft_item, services.catalog)}


@router.post("/table/remove")
async def remove_from_table(body: RemoveFromTableRequest, user: User = Depends(current_user),
                            services: Services = Depends(get_services)):
    item = await services.crafting.remove_from_table(user.user_id, body.craft_item_id)
    return {"item": serializers.item(item, services.catalog)}
