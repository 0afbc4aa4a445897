"""Модель уведомления о выигрыше"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database.connection import Base
from database.models.auction import new_id


class BidNotification(Base):
    """Уведомление победителю аукциона"""
    __tablename__ = "bid_notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    bid_id = Column(String(36), ForeignKey("bids.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)  # Получатель
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Связи
    auction = relationship("Auction", back_populates="notifications")
