"""Модель аукциона"""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from database.connection import Base


class AuctionStatus(str, enum.Enum):
    """Статус аукциона"""
    ACTIVE = "active"  # Принимает предложения
    CLOSED = "closed"  # Закрыт, победитель определен (если были предложения)


def new_id() -> str:
    return str(uuid.uuid4())


class Auction(Base):
    """Модель аукциона (лот в группе)"""
    __tablename__ = "bids"

    id = Column(String(36), primary_key=True, default=new_id)
    group_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)  # Создатель лота
    item_name = Column(String(255), nullable=False)
    item_description = Column(Text, nullable=True)
    starting_price = Column(Numeric(12, 2, asdecimal=False), default=0, nullable=False)
    current_price = Column(Numeric(12, 2, asdecimal=False), default=0, nullable=False)
    status = Column(String(50), default=AuctionStatus.ACTIVE.value, nullable=False, index=True)
    ends_at = Column(DateTime(timezone=True), nullable=False, index=True)
    # Заполняются только при закрытии, если есть победитель
    winner_id = Column(String(36), nullable=True, index=True)
    payment_deadline = Column(DateTime(timezone=True), nullable=True)
    verification_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Связи
    offers = relationship("Offer", back_populates="auction", order_by="Offer.created_at")
    notifications = relationship("BidNotification", back_populates="auction")
