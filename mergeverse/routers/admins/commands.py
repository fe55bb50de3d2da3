from aiogram import Router, types
from aiogram.filters import Command

from loader import services
from mergeverse.filters import IsAdmin, IsPrivate
from mergeverse.templates import texts

admin_commands_router = Router(name='admin_commands_router')


@admin_commands_router.message(Command('reload'), IsPrivate(), IsAdmin())
async def reload_catalog(message: types.Message):
    snapshot = await services.admin.reload_catalog()
    await message.answer(texts.catalog_reloaded.format(gifts=len(snapshot.gifts), steps=snapshot.giveaway_steps))
