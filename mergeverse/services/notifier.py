from contextlib import suppress

from aiogram import Bot
from aiogram.exceptions import TelegramForbiddenError, TelegramBadRequest

from mergeverse.keyboards import inline
from mergeverse.templates import texts


class WinnerNotifier:
    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_winner_notification(self, user_id: int, winner_id: int, gift_name: str, rarity):
        # закрытая личка или удаленный чат - не повод валить розыгрыш
        with suppress(TelegramForbiddenError, TelegramBadRequest):
            await self.bot.send_message(
                chat_id=user_id,
                text=texts.winner_message.format(gift_name=gift_name, rarity=inline.rarity_title(rarity)),
                reply_markup=inline.winner_choice_kb(winner_id),
            )
