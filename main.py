import asyncio
import config
import uvicorn

from contextlib import suppress

from aiogram import Dispatcher, Bot

from loader import bot, dp, services
from webapp import create_app
from mergeverse.logger import logger
from mergeverse.database import db, redis_pool
from mergeverse.database.seed import seed_if_empty
from mergeverse.schedule import scheduler_start
from mergeverse.routers import reg_handlers
from mergeverse.middlewares import reg_middlewares


async def set_up_utils(dp: Dispatcher, bot: Bot):
    await db.check_and_create_tables()
    await seed_if_empty(db)
    await services.catalog.load()
    await redis_pool.init_pool()
    await scheduler_start()
    await reg_handlers(dp)
    await reg_middlewares(dp, services.users)

    logger.info(f'Бот запущен - @{(await bot.get_me()).username}')


async def main() -> None:
    await set_up_utils(dp=dp, bot=bot)

    if config.SKIP_UPDATES:
        await bot.delete_webhook(drop_pending_updates=True)

    # API в том же event loop, чтобы кэш каталога был общий с ботом и задачами
    server = uvicorn.Server(uvicorn.Config(
        create_app(services),
        host=config.FAST_API_HOST,
        port=config.FAST_API_PORT,
        log_config=None,
    ))
    logger.info(f"FastAPI host={config.FAST_API_HOST}, port={config.FAST_API_PORT}")

    polling = asyncio.create_task(dp.start_polling(bot, handle_signals=False))
    try:
        await server.serve()
    finally:
        with suppress(RuntimeError):
            await dp.stop_polling()
        await asyncio.gather(polling, return_exceptions=True)
        await redis_pool.close()
        await db.dispose()
        await bot.session.close()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print(f'Бот выключен')
    except Exception as e:
        logger.exception("Произошла ошибка: %s", e)
