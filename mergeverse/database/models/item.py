from mergeverse.utils.misc_function import get_time_now
from sqlalchemy import (Column, Integer, BigInteger, Boolean, DateTime, Enum, ForeignKey,
                        CheckConstraint, UniqueConstraint, Index)
from sqlalchemy.orm import relationship

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import Level


class Item(Base):
    __tablename__ = 'items'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    level = Column(Enum(Level, name='level'), nullable=False)
    is_tradeable = Column(Boolean, nullable=False, default=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    user = relationship("User", back_populates="items")
    gift = relationship("Gift", lazy="joined", innerjoin=True)

    # пустые стеки удаляются, а не хранятся с нулем
    __table_args__ = (
        UniqueConstraint('user_id', 'gift_id', 'level', 'is_tradeable', name='uq_items_stack'),
        CheckConstraint('quantity > 0', name='ck_items_quantity_positive'),
        Index('idx_items_user_level', user_id, level),
    )


class CraftItem(Base):
    __tablename__ = 'craft_items'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    level = Column(Enum(Level, name='level'), nullable=False)
    is_tradeable = Column(Boolean, nullable=False, default=False)
    position_x = Column(Integer, nullable=False)
    position_y = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    gift = relationship("Gift", lazy="joined", innerjoin=True)

    __table_args__ = (
        UniqueConstraint('user_id', 'position_x', 'position_y', name='uq_craft_items_position'),
    )


class History(Base):
    __tablename__ = 'history'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    level = Column(Enum(Level, name='level'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    __table_args__ = (
        UniqueConstraint('user_id', 'gift_id', 'level', name='uq_history_cell'),
    )
