from mergeverse.utils.misc_function import get_time_now
from sqlalchemy import Column, Integer, BigInteger, ForeignKey, DateTime, Enum, Numeric, String

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import PaymentStatus


class Payment(Base):
    __tablename__ = 'payments'

    id = Column(Integer, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.user_id'), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    price_amount = Column(Numeric(18, 2), nullable=False)
    status = Column(Enum(PaymentStatus, name='payment_status'), nullable=False, default=PaymentStatus.PENDING)
    external_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_time_now)
    updated_at = Column(DateTime(timezone=True), default=get_time_now, onupdate=get_time_now)
