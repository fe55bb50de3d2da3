from .base import Base
from .enums import (Rarity, Level, LEVELS, PAID_LEVELS, MAX_LEVEL, RARITY_ORDER, next_level,
                    AuctionStatus, GiveawayStatus, WinnerChoice, PackType, ReferralSettingsName,
                    ValueType, PaymentStatus, PayoutStatus, SystemSettingsName)
from .user import User
from .gift import Gift, Price
from .item import Item, CraftItem, History
from .auction import Auction, Bid
from .giveaway import Giveaway, Entry, Winner
from .compensation import Compensation
from .collection_prices import VerticalPrice, HorizontalPrice
from .referral_settings import ReferralSettings
from .settings import Settings
from .payment import Payment
from .payout import Payout

__all__ = [
    'Base',
    'Rarity', 'Level', 'LEVELS', 'PAID_LEVELS', 'MAX_LEVEL', 'RARITY_ORDER', 'next_level',
    'AuctionStatus', 'GiveawayStatus', 'WinnerChoice', 'PackType', 'ReferralSettingsName',
    'ValueType', 'PaymentStatus', 'PayoutStatus', 'SystemSettingsName',
    'User', 'Gift', 'Price', 'Item', 'CraftItem', 'History', 'Auction', 'Bid',
    'Giveaway', 'Entry', 'Winner', 'Compensation', 'VerticalPrice', 'HorizontalPrice',
    'ReferralSettings', 'Settings', 'Payment', 'Payout',
]
