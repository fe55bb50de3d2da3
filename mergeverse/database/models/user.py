from mergeverse.utils.misc_function import get_time_now
from sqlalchemy import Column, Integer, BigInteger, Boolean, DateTime, ForeignKey, Numeric, String, Index
from sqlalchemy.orm import relationship

from mergeverse.database.models.base import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, unique=True, nullable=False)
    user_name = Column(String, nullable=True)
    user_fullname = Column(String, nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    active_at = Column(DateTime(timezone=True), default=None)
    banned = Column(Boolean, nullable=False, default=False)
    referred_by = Column(BigInteger, ForeignKey('users.user_id'), nullable=True)
    crypto_wallet = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_time_now)

    items = relationship("Item", back_populates="user")

    __table_args__ = (
        Index('idx_users_referred_by', referred_by),
        Index('idx_users_active_at', active_at),
    )
