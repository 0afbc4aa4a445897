"""Сервис для работы с аукционами"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, or_
from sqlalchemy.orm import selectinload
from database.models.auction import Auction, AuctionStatus
from database.models.offer import Offer


def as_utc(value: datetime) -> datetime:
    """Привести datetime к UTC (SQLite возвращает naive datetime)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def create_auction(
    session: AsyncSession,
    group_id: str,
    user_id: str,
    item_name: str,
    starting_price: float,
    duration: timedelta,
    item_description: Optional[str] = None
) -> Auction:
    """Создать аукцион"""
    auction = Auction(
        group_id=group_id,
        user_id=user_id,
        item_name=item_name,
        item_description=item_description,
        starting_price=starting_price,
        current_price=starting_price,
        status=AuctionStatus.ACTIVE.value,
        ends_at=datetime.now(timezone.utc) + duration
    )
    session.add(auction)
    await session.commit()
    await session.refresh(auction)
    return auction


async def place_offer(
    session: AsyncSession,
    auction_id: str,
    user_id: str,
    amount: float
) -> Offer:
    """Сделать предложение цены"""
    result = await session.execute(
        select(Auction).where(
            Auction.id == auction_id,
            Auction.status == AuctionStatus.ACTIVE.value
        )
    )
    auction = result.scalar_one_or_none()

    if not auction:
        raise ValueError("Аукцион не найден или не активен")

    if as_utc(auction.ends_at) <= datetime.now(timezone.utc):
        raise ValueError("Аукцион уже завершился")

    if amount <= auction.current_price:
        raise ValueError(f"Предложение должно быть выше текущей цены ({auction.current_price:,})")

    offer = Offer(
        bid_id=auction_id,
        user_id=user_id,
        offer_amount=amount
    )
    session.add(offer)

    # Цена растет только вверх, даже если параллельно пришло большее предложение
    await session.execute(
        update(Auction)
        .where(Auction.id == auction_id, Auction.current_price < amount)
        .values(current_price=amount)
    )

    await session.commit()
    await session.refresh(offer)
    return offer


async def get_active_auctions(session: AsyncSession, group_id: str) -> list[Auction]:
    """Получить активные аукционы группы"""
    result = await session.execute(
        select(Auction)
        .options(selectinload(Auction.offers))
        .where(
            Auction.group_id == group_id,
            Auction.status == AuctionStatus.ACTIVE.value
        )
        .order_by(Auction.created_at.desc())
    )
    return list(result.scalars().all())


async def get_expired_auctions(
    session: AsyncSession,
    now: datetime,
    limit: int,
    after: Optional[tuple[datetime, str]] = None
) -> list[Auction]:
    """Получить страницу истекших активных аукционов вместе с предложениями

    Страницы идут по ключу (ends_at, id); after - ключ последнего аукциона
    предыдущей страницы.
    """
    query = (
        select(Auction)
        .options(selectinload(Auction.offers))
        .where(
            Auction.status == AuctionStatus.ACTIVE.value,
            Auction.ends_at < now
        )
        .order_by(Auction.ends_at.asc(), Auction.id.asc())
        .limit(limit)
    )
    if after is not None:
        last_ends_at, last_id = after
        query = query.where(
            or_(
                Auction.ends_at > last_ends_at,
                and_(Auction.ends_at == last_ends_at, Auction.id > last_id)
            )
        )

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_verification_url(session: AsyncSession, auction_id: str) -> Optional[str]:
    """Получить ссылку на верификацию победителя"""
    result = await session.execute(
        select(Auction.verification_url).where(Auction.id == auction_id)
    )
    return result.scalar_one_or_none()
