from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from mergeverse.logger import logger
from mergeverse.database.models import ReferralSettingsName, ValueType
from mergeverse.database.repositories import UserRepository
from mergeverse.utils.misc_function import to_money

DEFAULT_RULES = {
    ReferralSettingsName.REFERRAL_FIRST_LEVEL: (ValueType.PERCENTAGE, Decimal('4')),
    ReferralSettingsName.REFERRAL_SECOND_LEVEL: (ValueType.PERCENTAGE, Decimal('2')),
    ReferralSettingsName.REFERRAL_FULL_COLLECTION: (ValueType.FIXED, Decimal('22.50')),
}


class ReferralService:
    def __init__(self, catalog):
        self.catalog = catalog

    def _rule(self, name: ReferralSettingsName) -> tuple[ValueType, Decimal]:
        rule = self.catalog.referral_setting(name)
        if rule is None:
            logger.warning(f"Referral setting {name.value} is missing, using default")
            return DEFAULT_RULES[name]
        return rule.type, rule.value

    def _apply(self, name: ReferralSettingsName, amount: Decimal = Decimal('0')) -> Decimal:
        value_type, value = self._rule(name)
        if value_type == ValueType.PERCENTAGE:
            return to_money(Decimal(amount) * Decimal(value) / 100)
        return to_money(value)

    def first_level_commission(self, amount: Decimal) -> Decimal:
        return self._apply(ReferralSettingsName.REFERRAL_FIRST_LEVEL, amount)

    def second_level_commission(self, amount: Decimal) -> Decimal:
        return self._apply(ReferralSettingsName.REFERRAL_SECOND_LEVEL, amount)

    def full_collection_bonus(self) -> Decimal:
        return self._apply(ReferralSettingsName.REFERRAL_FULL_COLLECTION)

    async def deposit_commissions(self, session: AsyncSession, user_id: int, amount: Decimal) -> list[tuple[int, Decimal]]:
        """
        Начисляет реферальные с депозита по цепочке referred_by (два уровня).
        Работает внутри транзакции вызывающего.
        """
        user_repo = UserRepository(session)
        user = await user_repo.get_user(user_id)
        credited = []
        if not user or not user.referred_by:
            return credited

        first = await user_repo.get_user(user.referred_by)
        if not first:
            return credited
        bonus = self.first_level_commission(amount)
        if bonus > 0:
            await user_repo.credit(first.user_id, bonus)
            credited.append((first.user_id, bonus))

        if first.referred_by and first.referred_by != user_id:
            bonus = self.second_level_commission(amount)
            if bonus > 0:
                await user_repo.credit(first.referred_by, bonus)
                credited.append((first.referred_by, bonus))

        if credited:
            logger.info(f"Referral commissions for deposit of {user_id}: {credited}")
        return credited

    async def pay_full_collection_bonus(self, session: AsyncSession, user_id: int) -> tuple[int, Decimal] | None:
        user_repo = UserRepository(session)
        user = await user_repo.get_user(user_id)
        if not user or not user.referred_by:
            return None
        bonus = self.full_collection_bonus()
        await user_repo.credit(user.referred_by, bonus)
        logger.info(f"Full collection referral bonus {bonus} paid to {user.referred_by} for {user_id}")
        return user.referred_by, bonus
