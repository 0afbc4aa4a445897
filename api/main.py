"""HTTP API: закрытие истекших аукционов и поиск пользователя по email"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from aiogram import Bot
from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from database.connection import get_session
from services.exceptions import AuthorizationError, FetchError
from services.settlement import authorize_service_request, process_expired_auctions
from services.user import find_profile_by_email
from config import settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def error_message(error: Exception) -> str:
    return str(error) or "Unknown error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    bot = None
    if settings.SCHEDULER_ENABLED:
        from services.scheduler import start_scheduler

        if settings.BOT_TOKEN:
            bot = Bot(token=settings.BOT_TOKEN)
        task = start_scheduler(bot)

    yield

    if task is not None:
        task.cancel()
    if bot is not None:
        await bot.session.close()


app = FastAPI(title="Auction Settlement", lifespan=lifespan)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.options("/close-expired-bids")
async def close_expired_bids_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/close-expired-bids")
async def close_expired_bids(
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session)
):
    """Закрыть истекшие аукционы (только с сервисным ключом)"""
    try:
        authorize_service_request(authorization)
    except AuthorizationError:
        logger.warning("Отклонен запрос на закрытие аукционов: неверный ключ")
        return JSONResponse({"error": "Unauthorized"}, status_code=401, headers=CORS_HEADERS)

    try:
        report = await process_expired_auctions(session)
    except FetchError as e:
        return JSONResponse({"error": error_message(e)}, status_code=500, headers=CORS_HEADERS)
    except Exception as e:
        logger.error(f"Ошибка в close-expired-bids: {e}")
        return JSONResponse({"error": error_message(e)}, status_code=500, headers=CORS_HEADERS)

    return JSONResponse({"success": True, **report.as_dict()}, status_code=200, headers=CORS_HEADERS)


@app.post("/search-user-by-email")
async def search_user_by_email(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session)
):
    """Найти пользователя по email"""
    if not authorization:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        payload = await request.json()
        email = payload.get("email") if isinstance(payload, dict) else None

        if not email:
            return JSONResponse({"error": "Email is required"}, status_code=400)

        profile = await find_profile_by_email(session, email)
        if not profile:
            return JSONResponse({"error": "User not found"}, status_code=404)

        return JSONResponse(
            {"id": profile.id, "full_name": profile.full_name, "email": profile.email},
            status_code=200
        )
    except Exception as e:
        logger.error(f"Ошибка в search-user-by-email: {e}")
        return JSONResponse({"error": error_message(e)}, status_code=500)


def main():
    """Запуск API"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info("API запущен")
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
