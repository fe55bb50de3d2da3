from sqlalchemy import Column, Integer, String, Enum, UniqueConstraint, Numeric

from mergeverse.database.models.base import Base
from mergeverse.database.models.enums import Level, Rarity


class Gift(Base):
    __tablename__ = 'gifts'

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    rarity = Column(Enum(Rarity, name='rarity'), nullable=False)
    url = Column(String, nullable=True)


class Price(Base):
    __tablename__ = 'prices'

    id = Column(Integer, primary_key=True)
    rarity = Column(Enum(Rarity, name='rarity'), nullable=False)
    level = Column(Enum(Level, name='level'), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint('rarity', 'level', name='uq_prices_rarity_level'),
    )
