from aiogram import Dispatcher

from .start import start_router
from .winners import winners_router
from .admins import get_admin_routers
from .errors import errors_router


async def reg_handlers(dp: Dispatcher):
    dp.include_router(start_router)
    dp.include_routers(*get_admin_routers())
    dp.include_router(winners_router)
    dp.include_router(errors_router)
