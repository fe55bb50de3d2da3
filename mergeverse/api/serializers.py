"""ORM-объекты и dataclass'ы сервисов -> dict для JSON ответов."""
from mergeverse.database import models
from mergeverse.services.catalog import GiftInfo
from mergeverse.services.pack_service import PackResult
from mergeverse.services.packs import PackConfig


def gift(info: GiftInfo) -> dict:
    return {"id": info.id, "name": info.name, "rarity": info.rarity, "url": info.url}


def user(row: models.User) -> dict:
    return {
        "user_id": row.user_id,
        "user_name": row.user_name,
        "balance": row.balance,
        "streak": row.streak,
        "active_at": row.active_at,
        "banned": row.banned,
        "referred_by": row.referred_by,
        "crypto_wallet": row.crypto_wallet,
    }


def item(row: models.Item, catalog) -> dict:
    return {
        "id": row.id,
        "gift": gift(catalog.get_gift(row.gift_id)),
        "level": row.level,
        "is_tradeable": row.is_tradeable,
        "quantity": row.quantity,
    }


def craft_item(row: models.CraftItem, catalog) -> dict:
    return {
        "id": row.id,
        "gift": gift(catalog.get_gift(row.gift_id)),
        "level": row.level,
        "is_tradeable": row.is_tradeable,
        "x": row.position_x,
        "y": row.position_y,
    }


def bid(row: models.Bid) -> dict:
    return {"user_id": row.user_id, "amount": row.amount, "updated_at": row.updated_at}


def auction(row: models.Auction, catalog, with_bids: bool = False) -> dict:
    data = {
        "id": row.id,
        "seller_id": row.user_id,
        "gift": gift(catalog.get_gift(row.gift_id)),
        "level": row.level,
        "start": row.start,
        "current": row.current,
        "status": row.status,
        "ends_at": row.ends_at,
    }
    if with_bids:
        data["bids"] = [bid(b) for b in row.bids]
    return data


def giveaway(row: models.Giveaway, catalog) -> dict:
    return {
        "id": row.id,
        "gift": gift(catalog.get_gift(row.gift_id)),
        "status": row.status,
        "start_at": row.start_at,
        "ends_at": row.ends_at,
    }


def entry(row: models.Entry) -> dict:
    return {"id": row.id, "giveaway_id": row.giveaway_id, "gift_id": row.gift_id, "created_at": row.created_at}


def winner(row: models.Winner, catalog) -> dict:
    return {
        "id": row.id,
        "giveaway_id": row.giveaway_id,
        "user_id": row.user_id,
        "gift": gift(catalog.get_gift(row.gift_id)),
        "choice": row.choice,
        "is_finished": row.is_finished,
    }


def pack_config(config: PackConfig) -> dict:
    return {
        "type": config.type,
        "price": config.price,
        "level": config.level,
        "is_tradeable": config.is_tradeable,
        "total": config.total,
        "composition": {rarity.value: count for rarity, count in config.composition.items()},
    }


def pack_result(result: PackResult) -> dict:
    data = {
        "pack_type": result.pack_type,
        "level": result.level,
        "is_tradeable": result.is_tradeable,
        "gifts": [gift(g) for g in result.gifts],
    }
    if result.streak is not None:
        data["streak"] = result.streak
    return data


def compensation(row: models.Compensation) -> dict:
    return {"id": row.id, "pack_type": row.pack_type, "amount": row.amount}
