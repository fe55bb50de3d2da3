from aiogram.exceptions import TelegramForbiddenError
from aiogram.methods import SendMessage

from mergeverse.database.models import Rarity
from mergeverse.services.notifier import WinnerNotifier


class FakeBot:
    def __init__(self, error=None):
        self.error = error
        self.messages = []

    async def send_message(self, **kwargs):
        if self.error:
            raise self.error
        self.messages.append(kwargs)


async def test_winner_message_has_choice_buttons():
    bot = FakeBot()
    await WinnerNotifier(bot).send_winner_notification(42, 7, 'Plush Pepe', Rarity.MYTHIC)

    message = bot.messages[0]
    assert message["chat_id"] == 42
    assert 'Plush Pepe' in message["text"]
    buttons = message["reply_markup"]["inline_keyboard"][0]
    assert [b["callback_data"] for b in buttons] == ['winner:7:GIFT', 'winner:7:COMPENSATION']


async def test_blocked_user_is_ignored():
    error = TelegramForbiddenError(method=SendMessage(chat_id=42, text='x'), message='bot was blocked by the user')
    await WinnerNotifier(FakeBot(error)).send_winner_notification(42, 7, 'Plush Pepe', Rarity.MYTHIC)
