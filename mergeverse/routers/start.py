from aiogram import types, Router
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext

from mergeverse import templates
from mergeverse.filters import IsPrivate
from mergeverse.keyboards.inline import main_user

start_router = Router(name='start_router')


@start_router.message(Command('start'), IsPrivate(), StateFilter('*'))
async def start_menu(message: types.Message, state: FSMContext):
    # регистрация и реферер - в ExistsUserMiddleware
    await state.clear()
    await message.answer(
        text=templates.texts.start_message,
        reply_markup=main_user()
    )
