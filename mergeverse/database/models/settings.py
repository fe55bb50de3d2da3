from sqlalchemy import Column, Integer, String

from mergeverse.database.models.base import Base


class Settings(Base):
    """Строковые системные настройки; читаются в снимок каталога."""
    __tablename__ = 'settings'

    id = Column(Integer, primary_key=True)
    key = Column(String(64), unique=True, nullable=False)
    value = Column(String, nullable=True)
