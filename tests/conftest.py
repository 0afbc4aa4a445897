"""Общие фикстуры тестов"""
import os

# До импорта config: тестовая БД, ключ и без фонового планировщика
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SERVICE_ROLE_KEY"] = "test-service-key"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["ADMIN_USER_IDS"] = ""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from database.connection import create_session_maker, create_tables
from database.models import Auction, AuctionStatus, BidNotification, Offer

SERVICE_KEY = "test-service-key"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def now():
    return datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


async def add_auction(session, ends_at, offers=(), item_name="Vintage guitar", status=AuctionStatus.ACTIVE):
    """Создать аукцион; offers - кортежи (user_id, amount, created_at)"""
    auction = Auction(
        group_id="group-1",
        user_id="seller-1",
        item_name=item_name,
        starting_price=10,
        current_price=max([amount for _, amount, _ in offers], default=10),
        status=status.value,
        ends_at=ends_at,
    )
    session.add(auction)
    await session.flush()
    for user_id, amount, created_at in offers:
        session.add(Offer(bid_id=auction.id, user_id=user_id, offer_amount=amount, created_at=created_at))
    await session.commit()
    return auction.id


async def reload_auction(session, auction_id):
    result = await session.execute(
        select(Auction).where(Auction.id == auction_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def notifications_for(session, auction_id):
    result = await session.execute(
        select(BidNotification).where(BidNotification.bid_id == auction_id)
    )
    return list(result.scalars().all())


def hours(n):
    return timedelta(hours=n)
