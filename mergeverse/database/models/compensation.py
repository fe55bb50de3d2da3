from sqlalchemy import Column, Integer, BigInteger, Enum, ForeignKey, UniqueConstraint

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import PackType


class Compensation(Base):
    """Накопленные паки за участие в розыгрышах."""
    __tablename__ = 'compensations'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    pack_type = Column(Enum(PackType, name='pack_type'), nullable=False)
    amount = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('user_id', 'pack_type', name='uq_compensations_user_pack'),
    )
