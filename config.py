import os
from dotenv import load_dotenv
load_dotenv()


BOT_TOKEN = os.getenv('BOT_TOKEN', '')
BOT_USERNAME = os.getenv('BOT_USERNAME', 'mergeverse_bot')
WEBAPP_URL = os.getenv('WEBAPP_URL', 'https://mergeverse.app')
ADMINS = [int(i) for i in os.getenv('ADMINS', '').split(',') if i.strip()]
SKIP_UPDATES = os.getenv('SKIP_UPDATES', 'True').lower() == 'true'
FAST_API_HOST = os.getenv('FAST_API_HOST', '0.0.0.0')
FAST_API_PORT = int(os.getenv('FAST_API_PORT', '8000'))
WEBAPP_AUTH_MAX_AGE = int(os.getenv('WEBAPP_AUTH_MAX_AGE', str(24*60*60)))

TIMEZONE = os.getenv('TIMEZONE', 'UTC')
LOG_FILE = os.getenv('LOG_FILE', 'mergeverse.log')

# DEBUG MODE
DEBUG_MODE = os.getenv('DEBUG_MODE', 'True').lower() == 'true'
PG_DEBUG_MODE = os.getenv('PG_DEBUG_MODE', 'False').lower() == 'true'
REDIS_DEBUG_MODE = os.getenv('REDIS_DEBUG_MODE', 'False').lower() == 'true'

# PG
POSTGRES_USER = os.getenv('POSTGRES_USER', 'postgres')
POSTGRES_PASSWORD = os.getenv('POSTGRES_PASSWORD', 'root')
POSTGRES_DB = os.getenv('POSTGRES_DB', 'mergeverse')
POSTGRES_PORT = int(os.getenv('POSTGRES_PORT', '5432'))
POSTGRES_HOST = os.getenv('POSTGRES_HOST', 'localhost')

# REDIS
REDIS_DB = int(os.getenv('REDIS_DB', '1'))
REDIS_JOBSTORE_DB = int(os.getenv('REDIS_JOBSTORE_DB', '2'))
REDIS_PORT = int(os.getenv('REDIS_PORT', '6379'))
REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')

# PAYMENTS
NOWPAYMENTS_IPN_KEY = os.getenv('NOWPAYMENTS_IPN_KEY', '')
DEPOSIT_FEE_DIVISOR = float(os.getenv('DEPOSIT_FEE_DIVISOR', '0.99'))
PAYOUT_FEE_DIVISOR = float(os.getenv('PAYOUT_FEE_DIVISOR', '0.94'))

# AUCTIONS
AUCTION_DURATION_DAYS = int(os.getenv('AUCTION_DURATION_DAYS', '7'))
AUCTION_START_MULTIPLIER = float(os.getenv('AUCTION_START_MULTIPLIER', '1.2'))
AUCTION_COMMISSION = float(os.getenv('AUCTION_COMMISSION', '0.1'))

# GIVEAWAYS
GIVEAWAY_DEFAULT_STEPS = int(os.getenv('GIVEAWAY_DEFAULT_STEPS', '30'))
GIVEAWAY_MAX_WINNERS = int(os.getenv('GIVEAWAY_MAX_WINNERS', '10'))

# COLLECTION
FULL_COLLECTION_PRIZE = float(os.getenv('FULL_COLLECTION_PRIZE', '450'))
CRAFT_TABLE_SIZE = int(os.getenv('CRAFT_TABLE_SIZE', '16'))

# PACKS
STREAK_LENGTH = int(os.getenv('STREAK_LENGTH', '7'))

# JOBS
SETTLE_LOCK_TTL = int(os.getenv('SETTLE_LOCK_TTL', '55'))
