from decimal import Decimal

from pydantic import BaseModel, Field

from mergeverse.database.models import Level, PackType, ReferralSettingsName, ValueType


class BuyPackRequest(BaseModel):
    pack_type: PackType


class CraftRequest(BaseModel):
    item1_id: int
    item2_id: int


class MoveToTableRequest(BaseModel):
    item_id: int
    x: int = Field(ge=0)
    y: int = Field(ge=0)


class RemoveFromTableRequest(BaseModel):
    craft_item_id: int


class VerticalPrizeRequest(BaseModel):
    level: Level


class HorizontalPrizeRequest(BaseModel):
    gift_id: int


class CreateAuctionRequest(BaseModel):
    item_id: int


class PlaceBidRequest(BaseModel):
    auction_id: int
    amount: Decimal = Field(gt=0, decimal_places=2)


class FinishAuctionRequest(BaseModel):
    auction_id: int


class EnterGiveawayRequest(BaseModel):
    giveaway_id: int


class DepositRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)


class UpdateReferralSettingsRequest(BaseModel):
    name: ReferralSettingsName
    type: ValueType
    value: Decimal = Field(gt=0)


class UpdateGiveawayStepsRequest(BaseModel):
    steps: int = Field(ge=1)


class CollectionVisibleRequest(BaseModel):
    is_visible: bool


class ArchiveUserItemsRequest(BaseModel):
    user_id: int


class UserBanRequest(BaseModel):
    user_id: int
    banned: bool


class CryptoWalletRequest(BaseModel):
    crypto_wallet: str = Field(min_length=10, max_length=200)


class PayoutRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
