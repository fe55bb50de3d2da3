from fastapi import APIRouter, Depends

from mergeverse.api import serializers
from mergeverse.api.deps import current_user, get_services
from mergeverse.api.schemas import CreateAuctionRequest, PlaceBidRequest, FinishAuctionRequest
from mergeverse.database.models import AuctionStatus, User
from mergeverse.services import Services

router = APIRouter(prefix="/auction", tags=["auction"])


@router.get("")
async def list_auctions(status: AuctionStatus = AuctionStatus.ACTIVE, services: Services = Depends(get_services)):
    auctions = await services.auctions.list_auctions(status)
    return {"auctions": [serializers.auction(a, services.catalog) for a in auctions]}


@router.get("/mine")
async def my_auctions(user: User = Depends(current_user), services: Services = Depends(get_services)):
    auctions = await services.auctions.user_auctions(user.user_id)
    return {"auctions": [serializers.auction(a, services.catalog) for a in auctions]}


@router.get("/{auction_id}")
async def get_auction(auction_id: int, services: Services = Depends(get_services)):
    auction = await services.auctions.get_auction(auction_id)
    return serializers.auction(auction, services.catalog, with_bids=True)


@router.post("")
async def create_auction(body: CreateAuctionRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    auction = await services.auctions.create_auction(user.user_id, body.item_id)
    return serializers.auction(auction, services.catalog)


@router.post("/bid")
async def place_bid(body: PlaceBidRequest, user: User = Depends(current_user),
                    services: Services = Depends(get_services)):
    bid = await services.auctions.place_bid(user.user_id, body.auction_id, body.amount)
    return {"auction_id": body.auction_id, **serializers.bid(bid)}


@router.post("/finish")
async def finish_auction(body: FinishAuctionRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    auction = await services.auctions.finish_auction(user.user_id, body.auction_id)
    return serializers.auction(auction, services.catalog)
