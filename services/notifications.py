"""Сервис уведомлений победителям аукционов"""
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from database.models.notification import BidNotification


def format_deadline(deadline: datetime) -> str:
    """Дата в формате M/D/YYYY"""
    return f"{deadline.month}/{deadline.day}/{deadline.year}"


def build_winner_message(item_name: str, payment_deadline: datetime) -> str:
    """Текст поздравления победителю"""
    return (
        f'🎉 Congratulations! You won the bid for "{item_name}"! '
        f"Please complete payment by {format_deadline(payment_deadline)} "
        "and verify your identity."
    )


async def create_winner_notification(
    session: AsyncSession,
    auction_id: str,
    user_id: str,
    item_name: str,
    payment_deadline: datetime
) -> BidNotification:
    """Создать уведомление для победителя"""
    notification = BidNotification(
        bid_id=auction_id,
        user_id=user_id,
        message=build_winner_message(item_name, payment_deadline)
    )
    session.add(notification)
    await session.commit()
    return notification


async def get_unread_notifications(
    session: AsyncSession,
    user_id: str
) -> list[BidNotification]:
    """Непрочитанные уведомления пользователя, новые первыми"""
    result = await session.execute(
        select(BidNotification)
        .where(
            BidNotification.user_id == user_id,
            BidNotification.is_read == False  # noqa: E712
        )
        .order_by(BidNotification.created_at.desc())
    )
    return list(result.scalars().all())


async def mark_notification_read(session: AsyncSession, notification_id: str) -> bool:
    """Отметить уведомление прочитанным"""
    result = await session.execute(
        update(BidNotification)
        .where(BidNotification.id == notification_id)
        .values(is_read=True)
    )
    await session.commit()
    return result.rowcount > 0
