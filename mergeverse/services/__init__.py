import random
import config

from dataclasses import dataclass

from .catalog import Catalog, CatalogSnapshot, GiftInfo
from .referral_service import ReferralService
from .user_service import UserService
from .pack_service import PackService
from .craft_service import CraftService
from .collection_service import CollectionService
from .auction_service import AuctionService
from .giveaway_service import GiveawayService
from .payment_service import PaymentService
from .admin_service import AdminService


@dataclass
class Services:
    catalog: Catalog
    users: UserService
    packs: PackService
    crafting: CraftService
    collection: CollectionService
    auctions: AuctionService
    giveaways: GiveawayService
    referrals: ReferralService
    payments: PaymentService
    admin: AdminService


def build_services(db, notifier=None, rng: random.Random | None = None, bot_token: str = config.BOT_TOKEN,
                   admin_ids=None, ipn_key: str = config.NOWPAYMENTS_IPN_KEY) -> Services:
    """Собирает все сервисы вокруг одного Catalog; снимок загружается отдельно через catalog.load()."""
    catalog = Catalog(db)
    referrals = ReferralService(catalog)
    collection = CollectionService(db, catalog, referrals)
    giveaways = GiveawayService(db, catalog, notifier=notifier, rng=rng)
    return Services(
        catalog=catalog,
        users=UserService(db, catalog, bot_token=bot_token),
        packs=PackService(db, catalog, rng=rng),
        crafting=CraftService(db),
        collection=collection,
        auctions=AuctionService(db, catalog),
        giveaways=giveaways,
        referrals=referrals,
        payments=PaymentService(db, referrals, ipn_key=ipn_key),
        admin=AdminService(
            db, catalog, giveaways, collection,
            admin_ids=config.ADMINS if admin_ids is None else admin_ids,
        ),
    )


__all__ = [
    'Services', 'build_services', 'Catalog', 'CatalogSnapshot', 'GiftInfo',
    'ReferralService', 'UserService', 'PackService', 'CraftService', 'CollectionService',
    'AuctionService', 'GiveawayService', 'PaymentService', 'AdminService',
]
