import hashlib
import hmac
import json
import time

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import parse_qsl

from mergeverse.utils.exceptions import unauthorized


@dataclass
class TgUser:
    id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


def sign_init_data(pairs: Dict[str, str], bot_token: str) -> str:
    data_check_string = "\n".join(f"{k}={pairs[k]}" for k in sorted(pairs))
    secret = hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()
    return hmac.new(secret, data_check_string.encode("utf-8"), hashlib.sha256).hexdigest()


def validate_init_data(init_data: str, bot_token: str, max_age: int, now: float | None = None) -> Dict[str, str]:
    """
    Проверяет initData Telegram Web App и возвращает распарсенные пары.
    """
    if not init_data or not bot_token:
        raise unauthorized("Init data is missing")
    try:
        pairs = dict(parse_qsl(init_data, strict_parsing=True))
    except ValueError:
        raise unauthorized("Malformed init data")

    received_hash = pairs.pop("hash", None)
    pairs.pop("signature", None)
    if not received_hash:
        raise unauthorized("Hash is missing from init data")

    if not hmac.compare_digest(sign_init_data(pairs, bot_token), received_hash):
        raise unauthorized("Invalid hash - data integrity check failed")

    try:
        auth_date = int(pairs.get("auth_date", "0"))
    except ValueError:
        raise unauthorized("Invalid auth_date")
    if (now or time.time()) - auth_date > max_age:
        raise unauthorized("Auth data is too old")

    return pairs


def parse_user(pairs: Dict[str, str]) -> TgUser:
    raw_user = pairs.get("user")
    if not raw_user:
        raise unauthorized("Invalid user data")
    try:
        payload = json.loads(raw_user)
    except json.JSONDecodeError:
        raise unauthorized("Invalid user data format")
    user_id = payload.get("id")
    if not user_id:
        raise unauthorized("Invalid user data")
    return TgUser(
        id=int(user_id),
        username=payload.get("username"),
        first_name=payload.get("first_name"),
        last_name=payload.get("last_name"),
    )
