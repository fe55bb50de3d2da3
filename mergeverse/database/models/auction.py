from mergeverse.utils.misc_function import get_time_now
from sqlalchemy import (Column, Integer, BigInteger, DateTime, Enum, ForeignKey, Numeric,
                        UniqueConstraint, Index)
from sqlalchemy.orm import relationship

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import AuctionStatus, Level


class Auction(Base):
    __tablename__ = 'auctions'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    gift_id = Column(Integer, ForeignKey('gifts.id'), nullable=False)
    level = Column(Enum(Level, name='level'), nullable=False)
    start = Column(Numeric(18, 2), nullable=False)
    current = Column(Numeric(18, 2), nullable=False)
    status = Column(Enum(AuctionStatus, name='auction_status'), nullable=False, default=AuctionStatus.ACTIVE)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    gift = relationship("Gift", lazy="joined", innerjoin=True)
    bids = relationship("Bid", back_populates="auction", order_by="Bid.amount.desc()")

    __table_args__ = (
        Index('idx_auctions_status_ends_at', status, ends_at),
    )


class Bid(Base):
    __tablename__ = 'bids'

    id = Column(Integer, primary_key=True)
    auction_id = Column(Integer, ForeignKey('auctions.id'), nullable=False)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_time_now)
    updated_at = Column(DateTime(timezone=True), default=get_time_now, onupdate=get_time_now)

    auction = relationship("Auction", back_populates="bids")

    # одна активная ставка на пользователя, перебивка обновляет ее
    __table_args__ = (
        UniqueConstraint('auction_id', 'user_id', name='uq_bids_auction_user'),
    )
