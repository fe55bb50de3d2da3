from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import admin_user, get_services
from mergeverse.api.schemas import (UpdateReferralSettingsRequest, UpdateGiveawayStepsRequest,
                                    CollectionVisibleRequest, ArchiveUserItemsRequest, UserBanRequest)
from mergeverse.services import Services

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_user)])


def _referral_settings(services: Services) -> dict:
    return {
        name.value: {"type": rule.type, "value": rule.value}
        for name, rule in services.admin.get_referral_settings().items()
    }


@router.get("/referral-settings")
async def get_referral_settings(services: Services = Depends(get_services)):
    return _referral_settings(services)


@router.patch("/referral-settings")
async def update_referral_settings(body: UpdateReferralSettingsRequest, services: Services = Depends(get_services)):
    await services.admin.update_referral_setting(body.name, body.type, body.value)
    return _referral_settings(services)


@router.get("/giveaway-steps")
async def get_giveaway_steps(services: Services = Depends(get_services)):
    return {"steps": services.admin.get_giveaway_steps()}


@router.patch("/giveaway-steps")
async def update_giveaway_steps(body: UpdateGiveawayStepsRequest, services: Services = Depends(get_services)):
    return {"steps": await services.admin.update_giveaway_steps(body.steps)}


@router.get("/collection-visible")
async def get_collection_visible(services: Services = Depends(get_services)):
    return {"is_visible": services.admin.get_collection_visible()}


@router.patch("/collection-visible")
async def set_collection_visible(body: CollectionVisibleRequest, services: Services = Depends(get_services)):
    return {"is_visible": await services.admin.set_collection_visible(body.is_visible)}


@router.post("/reload")
async def reload_catalog(services: Services = Depends(get_services)):
    snapshot = await services.admin.reload_catalog()
    return {"gifts": len(snapshot.gifts), "steps": snapshot.giveaway_steps}


@router.post("/giveaway/monthly")
async def create_monthly_giveaways(services: Services = Depends(get_services)):
    created = await services.admin.create_monthly_giveaways()
    return {"giveaways": [serializers.giveaway(g, services.catalog) for g in created]}


@router.post("/giveaway/{giveaway_id}/finish")
async def finish_giveaway(giveaway_id: int, services: Services = Depends(get_services)):
    result = await services.admin.finish_giveaway(giveaway_id)
    return {
        "giveaway_id": giveaway_id,
        "status": result["status"],
        "entries": result["entries"],
        "winners": [serializers.winner(w, services.catalog) for w in result["winners"]],
    }


@router.get("/giveaway/winners")
async def pending_choices(services: Services = Depends(get_services)):
    winners = await services.admin.pending_choices()
    return {"winners": [serializers.winner(w, services.catalog) for w in winners]}


@router.post("/giveaway/winners/{winner_id}/finish")
async def mark_winner_finished(winner_id: int, services: Services = Depends(get_services)):
    winner = await services.admin.mark_winner_finished(winner_id)
    return serializers.winner(winner, services.catalog)


@router.post("/archive-items/user")
async def archive_user_items(body: ArchiveUserItemsRequest, services: Services = Depends(get_services)):
    return {"archived": await services.admin.archive_items(body.user_id)}


@router.post("/archive-items/all")
async def archive_all_items(services: Services = Depends(get_services)):
    return {"archived": await services.admin.archive_items()}


@router.patch("/user/ban")
async def set_user_ban(body: UserBanRequest, services: Services = Depends(get_services)):
    user = await services.admin.set_user_ban(body.user_id, body.banned)
    return serializers.user(user)
