from aiogram import F, Router, types

from loader import services
from mergeverse.database.models import WinnerChoice
from mergeverse.templates import texts
from mergeverse.utils.exceptions import ServiceError

winners_router = Router(name='winners_router')


@winners_router.callback_query(F.data.startswith('winner:'))
async def choose_prize(call: types.CallbackQuery):
    try:
        _, winner_id_raw, choice_raw = call.data.split(':')
        winner_id, choice = int(winner_id_raw), WinnerChoice(choice_raw)
    except ValueError:
        await call.answer('Некорректные данные', show_alert=True)
        return

    try:
        await services.giveaways.choose_prize(call.from_user.id, winner_id, choice)
    except ServiceError as e:
        await call.answer(e.message, show_alert=True)
        return

    await call.message.edit_reply_markup(reply_markup=None)
    await call.message.answer(texts.choice_saved[choice.value])
    await call.answer()
