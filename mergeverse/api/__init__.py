from . import users, gifts, packs, collection, auctions, giveaways, payments, admin


def get_api_routers():
    return [
        users.router,
        gifts.router,
        packs.router,
        collection.router,
        auctions.router,
        giveaways.router,
        payments.router,
        admin.router,
    ]
