from .winners import admin_winners_router
from .commands import admin_commands_router


def get_admin_routers():
    return [
        admin_commands_router,
        admin_winners_router,
    ]
