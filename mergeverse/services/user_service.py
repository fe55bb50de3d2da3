import config

from sqlalchemy.exc import IntegrityError

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import PAID_LEVELS, RARITY_ORDER
from mergeverse.database.repositories import UserRepository, ItemRepository, HistoryRepository
from mergeverse.utils.exceptions import forbidden, invalid_state, not_found
from mergeverse.utils.telegram_auth import validate_init_data, parse_user


def parse_referrer(start_param: str | None, user_id: int) -> int | None:
    """Числовой start_param, не равный самому пользователю."""
    if not start_param or not start_param.strip().isdigit():
        return None
    referrer_id = int(start_param)
    if referrer_id == user_id:
        return None
    return referrer_id


class UserService:
    def __init__(self, db, catalog, bot_token: str = config.BOT_TOKEN,
                 auth_max_age: int = config.WEBAPP_AUTH_MAX_AGE, bot_username: str = config.BOT_USERNAME):
        self.db = db
        self.catalog = catalog
        self.bot_token = bot_token
        self.auth_max_age = auth_max_age
        self.bot_username = bot_username

    async def authenticate(self, init_data: str) -> models.User:
        pairs = validate_init_data(init_data, self.bot_token, self.auth_max_age)
        tg_user = parse_user(pairs)
        fullname = " ".join(part for part in (tg_user.first_name, tg_user.last_name) if part) or None
        user = await self.register(
            tg_user.id,
            user_name=tg_user.username,
            user_fullname=fullname,
            referrer_id=parse_referrer(pairs.get("start_param"), tg_user.id),
        )
        if user.banned:
            raise forbidden("User is banned")
        return user

    async def register(self, user_id: int, user_name: str | None = None, user_fullname: str | None = None,
                       referrer_id: int | None = None) -> models.User:
        """
        Get-or-create. Реферер привязывается только при создании
        и только если такой пользователь уже есть.
        """
        try:
            async with self.db.transaction() as session:
                user_repo = UserRepository(session)
                user = await user_repo.get_user(user_id)
                if user:
                    if user_name and user.user_name != user_name:
                        user.user_name = user_name
                    return user

                referred_by = None
                if referrer_id and referrer_id != user_id and await user_repo.get_user(referrer_id):
                    referred_by = referrer_id

                user = await user_repo.create_user(
                    user_id=user_id,
                    user_name=user_name,
                    user_fullname=user_fullname,
                    referred_by=referred_by,
                )
                logger.info(f"New user {user_id} (referred_by={referred_by})")
                return user
        except IntegrityError:
            # параллельная регистрация того же пользователя
            async with self.db.get_session() as session:
                user = await UserRepository(session).get_user(user_id)
                if user is None:
                    raise
                return user

    async def profile(self, user_id: int) -> models.User:
        async with self.db.get_session() as session:
            user = await UserRepository(session).get_user(user_id)
        if user is None:
            raise not_found(f"User {user_id} not found")
        return user

    def referral_link(self, user_id: int) -> str:
        # start_param разбирается в parse_referrer
        return f"https://t.me/{self.bot_username}?startapp={user_id}"

    async def set_crypto_wallet(self, user_id: int, wallet: str) -> models.User:
        wallet = (wallet or "").strip()
        if not 10 <= len(wallet) <= 200:
            raise invalid_state("Wallet address must be between 10 and 200 characters")

        async with self.db.transaction() as session:
            user = await UserRepository(session).get_user(user_id, for_update=True)
            if user is None:
                raise not_found(f"User {user_id} not found")
            user.crypto_wallet = wallet

        logger.info(f"User {user_id} updated crypto wallet")
        return user

    async def inventory(self, user_id: int) -> list[models.Item]:
        async with self.db.get_session() as session:
            return await ItemRepository(session).get_user_items(user_id)

    async def collection_history(self, user_id: int) -> list[dict]:
        async with self.db.get_session() as session:
            owned = await HistoryRepository(session).get_user_history(user_id)

        gifts = sorted(self.catalog.gifts, key=lambda g: (RARITY_ORDER.index(g.rarity), g.name))
        return [
            {
                "gift": gift,
                "levels": [{"level": level, "owned": (gift.id, level) in owned} for level in PAID_LEVELS],
            }
            for gift in gifts
        ]
