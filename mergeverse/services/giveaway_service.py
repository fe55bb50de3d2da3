import random
import pytz

from collections import defaultdict
from datetime import datetime

from mergeverse.logger import logger
from mergeverse.database import models
from mergeverse.database.models import GiveawayStatus, WinnerChoice, Level, Rarity, MAX_LEVEL, SystemSettingsName
from mergeverse.database.repositories import (GiveawayRepository, ItemRepository, CompensationRepository,
                                              SettingsRepository, UserRepository)
from mergeverse.services.packs import COMPENSATIONS
from mergeverse.utils.exceptions import invalid_state, insufficient, not_found
from mergeverse.utils.misc_function import get_time_now, as_aware, pick_random, winners_count


def monthly_period(now: datetime) -> tuple[datetime, datetime]:
    """С 2-го числа 00:01 UTC до 1-го числа следующего месяца 00:01 UTC."""
    now = now.astimezone(pytz.UTC)
    start_at = datetime(now.year, now.month, 2, 0, 1, tzinfo=pytz.UTC)
    if now.month == 12:
        ends_at = datetime(now.year + 1, 1, 1, 0, 1, tzinfo=pytz.UTC)
    else:
        ends_at = datetime(now.year, now.month + 1, 1, 0, 1, tzinfo=pytz.UTC)
    return start_at, ends_at


class GiveawayService:
    def __init__(self, db, catalog, notifier=None, rng: random.Random | None = None):
        self.db = db
        self.catalog = catalog
        self.notifier = notifier
        self.rng = rng

    # reads

    async def list_giveaways(self, status: GiveawayStatus | None = None) -> list[models.Giveaway]:
        async with self.db.get_session() as session:
            return await GiveawayRepository(session).get_giveaways(status)

    async def get_giveaway(self, giveaway_id: int) -> dict:
        async with self.db.get_session() as session:
            giveaway_repo = GiveawayRepository(session)
            giveaway = await giveaway_repo.get(giveaway_id)
            if not giveaway:
                raise not_found("Giveaway not found")
            entries = await giveaway_repo.count_entries(giveaway_id)
            winners = await giveaway_repo.get_winners(giveaway_id)
        return {"giveaway": giveaway, "entries": entries, "winners": winners, "steps": self.catalog.giveaway_steps}

    async def user_entries(self, user_id: int) -> list[models.Entry]:
        async with self.db.get_session() as session:
            return await GiveawayRepository(session).get_user_entries(user_id)

    async def top_winners(self, rarity: Rarity | None = None, giveaway_id: int | None = None) -> list[dict]:
        """Зал славы: победы по пользователям, разбивка по редкости и сумма выигрышей."""
        async with self.db.get_session() as session:
            rows = await GiveawayRepository(session).get_win_counts(rarity, giveaway_id)
            users = {u.user_id: u for u in await UserRepository(session).get_users({row.user_id for row in rows})}

        table = defaultdict(lambda: {"wins": 0, "by_rarity": {}, "winnings": 0})
        for user_id, row_rarity, wins in rows:
            entry = table[user_id]
            entry["wins"] += wins
            entry["by_rarity"][row_rarity] = wins
            entry["winnings"] += self.catalog.snapshot.prices.get((row_rarity, MAX_LEVEL), 0) * wins

        result = [
            {
                "user_id": user_id,
                "user_name": users[user_id].user_name if user_id in users else None,
                **stats,
            }
            for user_id, stats in table.items()
        ]
        result.sort(key=lambda row: (-row["wins"], -row["winnings"], row["user_id"]))
        return result

    # entry

    async def enter_giveaway(self, user_id: int, giveaway_id: int) -> models.Entry:
        """Тратит один L10 предмет подарка розыгрыша. Забрать вход обратно нельзя."""
        async with self.db.transaction() as session:
            giveaway_repo = GiveawayRepository(session)
            item_repo = ItemRepository(session)

            giveaway = await giveaway_repo.get(giveaway_id, for_update=True)
            if not giveaway:
                raise not_found("Giveaway not found")
            if giveaway.status != GiveawayStatus.ACTIVE or as_aware(giveaway.ends_at) <= get_time_now():
                raise invalid_state("Giveaway is not active")
            if await giveaway_repo.get_entry(giveaway_id, user_id):
                raise invalid_state("You have already entered this giveaway")

            item = await item_repo.find_for_consumption(user_id, giveaway.gift_id, MAX_LEVEL)
            if not item:
                raise insufficient(f"You need a {MAX_LEVEL.value} item of this gift to enter")
            is_tradeable = item.is_tradeable
            await item_repo.take(item)

            entry = await giveaway_repo.add_entry(
                giveaway_id=giveaway_id,
                user_id=user_id,
                gift_id=giveaway.gift_id,
                is_tradeable=is_tradeable,
            )

        logger.info(f"User {user_id} entered giveaway {giveaway_id}")
        return entry

    # settlement

    async def finish_giveaway(self, giveaway_id: int) -> dict:
        """
        Подводит итоги розыгрыша.

        Меньше ``steps`` участников - CANCELLED и всем возвращаются предметы.
        Иначе min(10, ceil(n / steps)) победителей без повторов, FINISHED.
        Компенсация паками начисляется всем участникам в обоих случаях.
        """
        steps = self.catalog.giveaway_steps

        async with self.db.transaction() as session:
            giveaway_repo = GiveawayRepository(session)
            giveaway = await giveaway_repo.get(giveaway_id, for_update=True)
            if not giveaway:
                raise not_found("Giveaway not found")
            if giveaway.status != GiveawayStatus.ACTIVE:
                raise invalid_state(f"Giveaway is {giveaway.status.value}, expected ACTIVE")

            gift = self.catalog.get_gift(giveaway.gift_id)
            entries = await giveaway_repo.get_entries(giveaway_id)
            winners = []

            if len(entries) < steps:
                item_repo = ItemRepository(session)
                for entry in entries:
                    await item_repo.add_item(entry.user_id, entry.gift_id, Level.L10, entry.is_tradeable)
                giveaway.status = GiveawayStatus.CANCELLED
            else:
                chosen = pick_random(entries, winners_count(len(entries), steps), self.rng)
                for entry in chosen:
                    winners.append(await giveaway_repo.add_winner(
                        giveaway_id=giveaway_id,
                        user_id=entry.user_id,
                        gift_id=entry.gift_id,
                        choice=WinnerChoice.PENDING,
                        is_finished=False,
                    ))
                giveaway.status = GiveawayStatus.FINISHED

            pack_type, amount = COMPENSATIONS[gift.rarity]
            compensation_repo = CompensationRepository(session)
            for entry in entries:
                await compensation_repo.add(entry.user_id, pack_type, amount)

            status = giveaway.status

        logger.info(f"Giveaway {giveaway_id} {status.value}: {len(entries)} entries, steps={steps}, "
                    f"winners={[w.user_id for w in winners]}")

        for winner in winners:
            await self._notify(winner, gift)

        return {"giveaway": giveaway, "status": status, "entries": len(entries), "winners": winners}

    async def _notify(self, winner: models.Winner, gift):
        if self.notifier is None:
            return
        try:
            await self.notifier.send_winner_notification(winner.user_id, winner.id, gift.name, gift.rarity)
        except Exception as e:
            logger.error(f"Failed to notify winner {winner.user_id} (winner {winner.id}): {e}")

    async def finish_expired(self) -> int:
        async with self.db.get_session() as session:
            giveaway_ids = await GiveawayRepository(session).get_expired_ids(get_time_now())

        finished = 0
        for giveaway_id in giveaway_ids:
            try:
                await self.finish_giveaway(giveaway_id)
                finished += 1
            except Exception as e:
                logger.exception(f"Failed to finish giveaway {giveaway_id}: {e}")
        return finished

    async def activate_pending(self) -> int:
        async with self.db.transaction() as session:
            giveaways = await GiveawayRepository(session).get_due_for_activation(get_time_now())
            for giveaway in giveaways:
                giveaway.status = GiveawayStatus.ACTIVE

        if giveaways:
            logger.info(f"Activated giveaways: {[g.id for g in giveaways]}")
        return len(giveaways)

    async def create_monthly(self, now: datetime | None = None) -> list[models.Giveaway]:
        now = now or get_time_now()
        start_at, ends_at = monthly_period(now)
        status = GiveawayStatus.ACTIVE if start_at <= now else GiveawayStatus.PENDING

        created = []
        async with self.db.transaction() as session:
            giveaway_repo = GiveawayRepository(session)
            for gift in self.catalog.gifts:
                if await giveaway_repo.exists_for_period(gift.id, start_at):
                    continue
                created.append(await giveaway_repo.create(
                    gift_id=gift.id,
                    status=status,
                    start_at=start_at,
                    ends_at=ends_at,
                ))

        logger.info(f"Monthly giveaways created: {len(created)} ({start_at:%Y-%m-%d} - {ends_at:%Y-%m-%d})")
        return created

    # winners

    async def choose_prize(self, telegram_id: int, winner_id: int, choice: WinnerChoice) -> models.Winner:
        if choice not in (WinnerChoice.GIFT, WinnerChoice.COMPENSATION):
            raise invalid_state("Choice must be GIFT or COMPENSATION")

        async with self.db.transaction() as session:
            winner = await GiveawayRepository(session).get_winner(winner_id, for_update=True)
            if not winner or winner.user_id != telegram_id:
                raise not_found("Winner not found")
            if winner.choice != WinnerChoice.PENDING:
                raise invalid_state("Prize has already been chosen")
            winner.choice = choice

        logger.info(f"Winner {winner_id} ({telegram_id}) chose {choice.value}")
        return winner

    async def pending_choices(self) -> list[models.Winner]:
        async with self.db.get_session() as session:
            return await GiveawayRepository(session).get_pending_choices()

    async def mark_winner_finished(self, winner_id: int) -> models.Winner:
        async with self.db.transaction() as session:
            winner = await GiveawayRepository(session).get_winner(winner_id, for_update=True)
            if not winner:
                raise not_found("Winner not found")
            if winner.choice == WinnerChoice.PENDING:
                raise invalid_state("Winner has not chosen a prize yet")
            if winner.is_finished:
                raise invalid_state("Winner is already finished")
            winner.is_finished = True

        logger.info(f"Winner {winner_id} marked as finished")
        return winner

    # quorum

    async def update_steps(self, steps: int) -> int:
        if steps < 1:
            raise invalid_state("Steps must be at least 1")
        async with self.db.transaction() as session:
            await SettingsRepository(session).set(SystemSettingsName.GIVEAWAY_STEPS.value, str(steps))
        await self.catalog.reload()
        logger.info(f"Giveaway steps updated to {steps}")
        return self.catalog.giveaway_steps
