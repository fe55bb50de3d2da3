import logging
import sys
import config

from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

logger = logging.getLogger()
logger.setLevel(logging.DEBUG if config.DEBUG_MODE else logging.INFO)

# ошибки всегда пишем в файл, консоль только в debug
errors_handler = RotatingFileHandler(config.LOG_FILE, maxBytes=50 * 1024 * 1024, backupCount=3, encoding='utf-8')
errors_handler.setLevel(logging.ERROR)
errors_handler.setFormatter(logging.Formatter(LOG_FORMAT))
logger.addHandler(errors_handler)

if config.DEBUG_MODE:
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(stdout_handler)

for noisy in ('aiogram.event', 'apscheduler.executors.default', 'uvicorn.access', 'httpx'):
    logging.getLogger(noisy).setLevel(logging.WARNING)
