import config

from typing import Iterable

from aiogram.filters import BaseFilter
from aiogram.types import Message, CallbackQuery


class IsAdmin(BaseFilter):
    """Тот же список ADMINS, что проверяет AdminService для /admin API."""

    def __init__(self, admin_ids: Iterable[int] | None = None):
        self.admin_ids = set(config.ADMINS if admin_ids is None else admin_ids)

    async def __call__(self, event: Message | CallbackQuery) -> bool:
        return event.from_user is not None and event.from_user.id in self.admin_ids
