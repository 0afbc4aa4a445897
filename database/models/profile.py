"""Модель профиля пользователя"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from database.connection import Base
from database.models.auction import new_id


class Profile(Base):
    """Профиль пользователя"""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
