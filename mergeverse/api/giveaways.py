from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import EnterGiveawayRequest
from mergeverse.database.models import GiveawayStatus, Rarity, User
from mergeverse.services import Services

router = APIRouter(prefix="/giveaway", tags=["giveaway"])


@router.get("")
async def list_giveaways(status: GiveawayStatus | None = None, services: Services = Depends(get_services)):
    giveaways = await services.giveaways.list_giveaways(status)
    return {"giveaways": [serializers.giveaway(g, services.catalog) for g in giveaways]}


@router.get("/entries")
async def my_entries(user: User = Depends(current_user), services: Services = Depends(get_services)):
    entries = await services.giveaways.user_entries(user.user_id)
    return {"entries": [serializers.entry(e) for e in entries]}


@router.get("/winners")
async def hall_of_fame(rarity: Rarity | None = None, giveaway_id: int | None = None,
                       services: Services = Depends(get_services)):
    return {"winners": await services.giveaways.top_winners(rarity, giveaway_id)}


@router.get("/{giveaway_id}")
async def get_giveaway(giveaway_id: int, services: Services = Depends(get_services)):
    result = await services.giveaways.get_giveaway(giveaway_id)
    return {
        **serializers.giveaway(result["giveaway"], services.catalog),
        "entries": result["entries"],
        "steps": result["steps"],
        "winners": [serializers.winner(w, services.catalog) for w in result["winners"]],
    }


@router.post("/enter")
async def enter_giveaway(body: EnterGiveawayRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    entry = await services.giveaways.enter_giveaway(user.user_id, body.giveaway_id)
    return serializers.entry(entry)
