"""Модели базы данных"""
from .auction import Auction, AuctionStatus
from .offer import Offer
from .notification import BidNotification
from .profile import Profile

__all__ = [
    "Auction",
    "AuctionStatus",
    "Offer",
    "BidNotification",
    "Profile",
]
