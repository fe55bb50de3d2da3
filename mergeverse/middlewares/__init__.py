from aiogram import Dispatcher

from .exists_user import ExistsUserMiddleware


async def reg_middlewares(dp: Dispatcher, users):
    # outer
    dp.update.outer_middleware(ExistsUserMiddleware(users))
