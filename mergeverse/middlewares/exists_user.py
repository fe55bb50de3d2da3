from typing import Any, Awaitable, Callable, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.types import Update

from mergeverse.logger import logger
from mergeverse.services.user_service import parse_referrer


class ExistsUserMiddleware(BaseMiddleware):
    """Регистрирует пользователя на любом апдейте и кладет его в data['user']."""

    def __init__(self, users):
        self.users = users

    @staticmethod
    def get_ref(event: Update) -> Optional[str]:
        text = getattr(event.message, 'text', None) if event.message else None
        if text and text.startswith('/start') and len(text.split(' ')) == 2:
            return text.split(' ')[1]
        return None

    async def __call__(
        self,
        handler: Callable[[Update, Dict[str, Any]], Awaitable[Any]],
        event: Update,
        data: Dict[str, Any]
    ) -> Any:
        event_user = data.get('event_from_user')
        if event_user is None or event_user.is_bot:
            return await handler(event, data)

        ref = self.get_ref(event)
        try:
            user = await self.users.register(
                event_user.id,
                user_name=event_user.username,
                user_fullname=event_user.full_name,
                referrer_id=parse_referrer(ref, event_user.id),
            )
        except Exception as e:
            logger.error(f"Failed to register user {event_user.id}: {e}")
            raise

        if user.banned:
            return

        data['user'] = user
        data['ref'] = ref
        return await handler(event, data)
