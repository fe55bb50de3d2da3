from fastapi import Depends, Header, Request

from mergeverse.database.models import User
from mergeverse.services import Services
from mergeverse.utils.exceptions import forbidden

INIT_DATA_HEADER = "X-Telegram-Init-Data"


def get_services(request: Request) -> Services:
    return request.app.state.services


async def current_user(
    services: Services = Depends(get_services),
    init_data: str | None = Header(default=None, alias=INIT_DATA_HEADER),
) -> User:
    return await services.users.authenticate(init_data or "")


async def admin_user(
    user: User = Depends(current_user),
    services: Services = Depends(get_services),
) -> User:
    if not services.admin.is_admin(user.user_id):
        raise forbidden("Admin access required")
    return user
