from mergeverse.utils.misc_function import get_time_now
from sqlalchemy import (Column, Integer, BigInteger, Boolean, DateTime, Enum, ForeignKey,
                        UniqueConstraint, Index)
from sqlalchemy.orm import relationship

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import GiveawayStatus, WinnerChoice


class Giveaway(Base):
    __tablename__ = 'giveaways'

    id = Column(Integer, primary_key=True)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    status = Column(Enum(GiveawayStatus, name='giveaway_status'), nullable=False, default=GiveawayStatus.PENDING)
    start_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    gift = relationship("Gift", lazy="joined", innerjoin=True)

    __table_args__ = (
        Index('idx_giveaways_status_ends_at', status, ends_at),
    )


class Entry(Base):
    __tablename__ = 'entries'

    id = Column(Integer, primary_key=True)
    giveaway_id = Column(Integer, ForeignKey('giveaways.id'), nullable=False)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    is_tradeable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    __table_args__ = (
        UniqueConstraint('giveaway_id', 'user_id', name='uq_entries_giveaway_user'),
    )


class Winner(Base):
    __tablename__ = 'winners'

    id = Column(Integer, primary_key=True)
    giveaway_id = Column(Integer, ForeignKey('giveaways.id'), nullable=False)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    choice = Column(Enum(WinnerChoice, name='winner_choice'), nullable=False, default=WinnerChoice.PENDING)
    is_finished = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    gift = relationship("Gift", lazy="joined", innerjoin=True)

    __table_args__ = (
        UniqueConstraint('giveaway_id', 'user_id', name='uq_winners_giveaway_user'),
    )
