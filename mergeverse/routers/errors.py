from typing import Any

from aiogram import Router
from aiogram.exceptions import (TelegramAPIError,
                                TelegramUnauthorizedError,
                                TelegramBadRequest,
                                TelegramNetworkError,
                                TelegramForbiddenError,
                                TelegramRetryAfter)
from aiogram.handlers import ErrorHandler

from mergeverse.logger import logger
from mergeverse.utils.exceptions import ServiceError

errors_router = Router(name='errors_router')

# ожидаемые ошибки телеграма: пишем строку в лог и гасим апдейт
QUIET_ERRORS = (TelegramUnauthorizedError, TelegramForbiddenError, TelegramRetryAfter)


@errors_router.errors()
class BotErrorHandler(ErrorHandler):
    async def handle(self) -> Any:
        exception = self.event.exception

        if isinstance(exception, ServiceError):
            # доменная ошибка, которую хендлер не обработал сам
            logger.warning(f'{exception!r} while handling update {self.update.update_id}')
            callback = self.update.callback_query
            if callback is not None:
                await callback.answer(exception.message, show_alert=True)
            return True

        if isinstance(exception, QUIET_ERRORS):
            logger.info(f'{type(exception).__name__}: {self.exception_message}')
            return True

        if isinstance(exception, (TelegramNetworkError, TelegramBadRequest, TelegramAPIError)):
            logger.exception(f'{type(exception).__name__}: {self.exception_message} \nUpdate: {self.update}')
            return True

        logger.exception(f'Update: {self.update} \n{self.exception_name}')
