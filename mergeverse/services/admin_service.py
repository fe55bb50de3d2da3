from mergeverse.logger import logger
from mergeverse.database.models import ReferralSettingsName, ValueType, SystemSettingsName
from mergeverse.database.repositories import CatalogRepository, SettingsRepository, UserRepository
from mergeverse.utils.exceptions import invalid_state, not_found
from mergeverse.utils.misc_function import to_money


class AdminService:
    """Админские операции; всё, что меняет закэшированные данные, заканчивается reload()."""

    def __init__(self, db, catalog, giveaways, collection, admin_ids=()):
        self.db = db
        self.catalog = catalog
        self.giveaways = giveaways
        self.collection = collection
        self.admin_ids = set(admin_ids)

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids

    async def reload_catalog(self):
        return await self.catalog.reload()

    def get_referral_settings(self) -> dict:
        return dict(self.catalog.snapshot.referral)

    async def update_referral_setting(self, name: ReferralSettingsName, value_type: ValueType, value) -> dict:
        value = to_money(value)
        if value <= 0:
            raise invalid_state("Value must be positive")
        async with self.db.transaction() as session:
            await CatalogRepository(session).set_referral_setting(name, value_type, value)
        await self.catalog.reload()
        logger.info(f"Referral setting {name.value} updated: {value_type.value} {value}")
        return self.get_referral_settings()

    def get_giveaway_steps(self) -> int:
        return self.catalog.giveaway_steps

    async def update_giveaway_steps(self, steps: int) -> int:
        return await self.giveaways.update_steps(steps)

    def get_collection_visible(self) -> bool:
        return self.catalog.collection_visible

    async def set_collection_visible(self, visible: bool) -> bool:
        async with self.db.transaction() as session:
            await SettingsRepository(session).set(SystemSettingsName.COLLECTION_VISIBLE.value, 'true' if visible else 'false')
        await self.catalog.reload()
        logger.info(f"Collection visibility set to {visible}")
        return self.catalog.collection_visible

    async def finish_giveaway(self, giveaway_id: int) -> dict:
        return await self.giveaways.finish_giveaway(giveaway_id)

    async def create_monthly_giveaways(self):
        return await self.giveaways.create_monthly()

    async def pending_choices(self):
        return await self.giveaways.pending_choices()

    async def mark_winner_finished(self, winner_id: int):
        return await self.giveaways.mark_winner_finished(winner_id)

    async def archive_items(self, user_id: int | None = None) -> int:
        return await self.collection.archive_items(user_id)

    async def set_user_ban(self, user_id: int, banned: bool):
        if banned and self.is_admin(user_id):
            raise invalid_state("Cannot ban admin users")
        async with self.db.transaction() as session:
            user = await UserRepository(session).get_user(user_id, for_update=True)
            if not user:
                raise not_found(f"User {user_id} not found")
            user.banned = banned
        logger.info(f"User {user_id} banned={banned}")
        return user
