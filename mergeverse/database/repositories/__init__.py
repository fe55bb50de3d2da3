from .user_repo import UserRepository
from .item_repo import ItemRepository
from .history_repo import HistoryRepository
from .craft_item_repo import CraftItemRepository
from .auction_repo import AuctionRepository
from .giveaway_repo import GiveawayRepository
from .catalog_repo import CatalogRepository
from .bot_settings import SettingsRepository
from .payment_repo import PaymentRepository
from .payout_repo import PayoutRepository
from .compensation_repo import CompensationRepository

__all__ = [
    'UserRepository',
    'ItemRepository',
    'HistoryRepository',
    'CraftItemRepository',
    'AuctionRepository',
    'GiveawayRepository',
    'CatalogRepository',
    'SettingsRepository',
    'PaymentRepository',
    'PayoutRepository',
    'CompensationRepository',
]
