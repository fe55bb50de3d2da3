from sqlalchemy import Column, Integer, Enum, Numeric

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import ReferralSettingsName, ValueType


class ReferralSettings(Base):
    __tablename__ = 'referral_settings'

    id = Column(Integer, primary_key=True)
    name = Column(Enum(ReferralSettingsName, name='referral_settings_name'), unique=True, nullable=False)
    type = Column(Enum(ValueType, name='value_type'), nullable=False)
    value = Column(Numeric(18, 2), nullable=False)
