from aiogram import F, Router, types
from aiogram.filters import Command

from loader import services
from mergeverse.filters import IsAdmin, IsPrivate
from mergeverse.keyboards import inline
from mergeverse.templates import texts
from mergeverse.utils.exceptions import ServiceError

admin_winners_router = Router(name='admin_winners_router')


@admin_winners_router.message(Command('winners'), IsPrivate(), IsAdmin())
async def pending_winners(message: types.Message):
    winners = await services.admin.pending_choices()
    if not winners:
        await message.answer(texts.pending_choices_empty)
        return

    for winner in winners:
        await message.answer(
            texts.pending_choice_line.format(
                winner_id=winner.id,
                user_id=winner.user_id,
                gift_name=services.catalog.get_gift(winner.gift_id).name,
                choice=winner.choice.value,
            ),
            reply_markup=inline.winner_done_kb(winner.id),
        )


@admin_winners_router.callback_query(F.data.startswith('winner_done:'), IsAdmin())
async def winner_done(call: types.CallbackQuery):
    _, winner_id_raw = call.data.split(':')
    try:
        await services.admin.mark_winner_finished(int(winner_id_raw))
    except ServiceError as e:
        await call.answer(e.message, show_alert=True)
        return

    await call.message.edit_reply_markup(reply_markup=None)
    await call.answer('Готово')
