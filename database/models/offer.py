"""Модель предложения цены"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database.connection import Base
from database.models.auction import new_id


class Offer(Base):
    """Предложение цены по аукциону"""
    __tablename__ = "bid_offers"

    id = Column(String(36), primary_key=True, default=new_id)
    bid_id = Column(String(36), ForeignKey("bids.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    offer_amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Связи
    auction = relationship("Auction", back_populates="offers")
