import config

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import next_level
from mergeverse.database.repositories import ItemRepository, HistoryRepository, CraftItemRepository
from mergeverse.utils.exceptions import invalid_state, insufficient, not_found


class CraftService:
    def __init__(self, db, table_size: int = config.CRAFT_TABLE_SIZE):
        self.db = db
        self.table_size = table_size

    async def craft(self, user_id: int, item1_id: int, item2_id: int) -> models.Item:
        """
        Сливает два одинаковых предмета (gift, level) в один уровнем выше.

        Один и тот же стек может дать обе половины, если в нем хотя бы 2 штуки.
        Непередаваемый вход делает результат непередаваемым.
        """
        async with self.db.transaction() as session:
            item_repo = ItemRepository(session)

            first = await item_repo.get_item(item1_id, user_id, for_update=True)
            if not first:
                raise not_found(f"Item {item1_id} not found")
            same_stack = item1_id == item2_id
            if same_stack:
                second = first
            else:
                second = await item_repo.get_item(item2_id, user_id, for_update=True)
                if not second:
                    raise not_found(f"Item {item2_id} not found")

            if first.gift_id != second.gift_id or first.level != second.level:
                raise invalid_state("Items must be the same gift at the same level")

            target_level = next_level(first.level)
            if target_level is None:
                raise invalid_state("Item is already at max level")

            if same_stack and first.quantity < 2:
                raise insufficient(f"Need 2 items in the stack, have {first.quantity}")

            gift_id = first.gift_id
            is_tradeable = bool(first.is_tradeable and second.is_tradeable)

            if same_stack:
                await item_repo.take(first, 2)
            else:
                await item_repo.take(first)
                await item_repo.take(second)

            result = await item_repo.add_item(user_id, gift_id, target_level, is_tradeable)
            await HistoryRepository(session).mark(user_id, gift_id, target_level)

        logger.info(f"User {user_id} crafted gift {gift_id} to {target_level.value} (tradeable={is_tradeable})")
        return result

    async def move_to_table(self, user_id: int, item_id: int, x: int, y: int) -> models.CraftItem:
        if not (0 <= x < self.table_size and 0 <= y < self.table_size):
            raise invalid_state(f"Position ({x}, {y}) is outside the {self.table_size}x{self.table_size} table")

        async with self.db.transaction() as session:
            item_repo = ItemRepository(session)
            craft_repo = CraftItemRepository(session)

            item = await item_repo.get_item(item_id, user_id, for_update=True)
            if not item:
                raise not_found(f"Item {item_id} not found")
            if await craft_repo.at_position(user_id, x, y):
                raise invalid_state(f"Position ({x}, {y}) is already occupied")

            craft_item = await craft_repo.add(
                user_id=user_id,
                gift_id=item.gift_id,
                level=item.level,
                is_tradeable=item.is_tradeable,
                position_x=x,
                position_y=y,
            )
            await item_repo.take(item)

        return craft_item

    async def remove_from_table(self, user_id: int, craft_item_id: int) -> models.Item:
        async with self.db.transaction() as session:
            craft_repo = CraftItemRepository(session)
            craft_item = await craft_repo.get(craft_item_id, user_id, for_update=True)
            if not craft_item:
                raise not_found(f"Craft item {craft_item_id} not found")

            item = await ItemRepository(session).add_item(
                user_id, craft_item.gift_id, craft_item.level, craft_item.is_tradeable
            )
            await craft_repo.delete(craft_item)

        return item

    async def get_table(self, user_id: int) -> dict:
        async with self.db.get_session() as session:
            items = await CraftItemRepository(session).get_table(user_id)
        return {"size": self.table_size, "items": items}
