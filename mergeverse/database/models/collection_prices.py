from sqlalchemy import Column, Integer, Enum, ForeignKey, Numeric

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import Level


class VerticalPrice(Base):
    __tablename__ = 'vertical_prices'

    id = Column(Integer, primary_key=True)
    level = Column(Enum(Level, name='level'), unique=True, nullable=False)
    price = Column(Numeric(18, 2), nullable=False)


class HorizontalPrice(Base):
    __tablename__ = 'horizontal_prices'

    id = Column(Integer, primary_key=True)
    gift_id = Column(Integer, ForeignKey('gifts.id'), unique=True, nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
