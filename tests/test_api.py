"""Тесты HTTP API"""
from datetime import datetime, timezone

import httpx
import pytest_asyncio

import api.main as api_main
from api.main import app
from database.connection import get_session
from database.models import AuctionStatus, Profile
from services.exceptions import FetchError
from tests.conftest import SERVICE_KEY, add_auction, hours, notifications_for, reload_auction

AUTH = {"Authorization": f"Bearer {SERVICE_KEY}"}


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}


async def test_preflight(client):
    response = await client.options("/close-expired-bids")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


async def test_close_requires_service_key(client, session):
    auction_id = await add_auction(session, datetime.now(timezone.utc) - hours(1))

    for headers in ({}, {"Authorization": "Bearer wrong"}):
        response = await client.post("/close-expired-bids", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert response.headers["access-control-allow-origin"] == "*"

    assert (await reload_auction(session, auction_id)).status == AuctionStatus.ACTIVE.value


async def test_close_expired_bids(client, session):
    now = datetime.now(timezone.utc)
    won_id = await add_auction(session, now - hours(2), offers=[("user-x", 40, now - hours(3))])
    empty_id = await add_auction(session, now - hours(1))
    await add_auction(session, now + hours(1))

    response = await client.post("/close-expired-bids", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "processed": 2,
        "fetched": 2,
        "settled": 2,
        "skipped": 0,
        "failed": 0,
    }
    assert response.headers["access-control-allow-origin"] == "*"
    assert (await reload_auction(session, won_id)).winner_id == "user-x"
    assert (await reload_auction(session, empty_id)).status == AuctionStatus.CLOSED.value
    assert len(await notifications_for(session, won_id)) == 1

    again = await client.post("/close-expired-bids", headers=AUTH)
    assert again.json()["processed"] == 0
    assert len(await notifications_for(session, won_id)) == 1


async def test_close_fetch_error(client, monkeypatch):
    async def broken(session):
        raise FetchError("connection refused")

    monkeypatch.setattr(api_main, "process_expired_auctions", broken)

    response = await client.post("/close-expired-bids", headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}


async def test_close_unexpected_error_without_message(client, monkeypatch):
    async def broken(session):
        raise RuntimeError()

    monkeypatch.setattr(api_main, "process_expired_auctions", broken)

    response = await client.post("/close-expired-bids", headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Unknown error"}


async def test_search_user_by_email(client, session):
    session.add(Profile(id="profile-1", full_name="Ann Lee", email="ann@example.com"))
    await session.commit()

    response = await client.post(
        "/search-user-by-email", json={"email": "ANN@example.com"}, headers={"Authorization": "Bearer user-token"}
    )

    assert response.status_code == 200
    assert response.json() == {"id": "profile-1", "full_name": "Ann Lee", "email": "ann@example.com"}


async def test_search_user_by_email_errors(client):
    headers = {"Authorization": "Bearer user-token"}

    response = await client.post("/search-user-by-email", json={"email": "ann@example.com"})
    assert response.status_code == 401

    response = await client.post("/search-user-by-email", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Email is required"}

    response = await client.post("/search-user-by-email", json={"email": "nobody@example.com"}, headers=headers)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
