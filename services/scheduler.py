"""Планировщик задач для закрытия аукционов"""
import asyncio
import logging
from typing import Optional
from aiogram import Bot
from sqlalchemy.ext.asyncio import async_sessionmaker
from database.connection import async_session_maker
from services.alerts import notify_admins_about_failures
from services.settlement import SettlementReport, process_expired_auctions
from config import settings

logger = logging.getLogger(__name__)


async def check_and_close_auctions(
    bot: Optional[Bot] = None,
    session_maker: async_sessionmaker = async_session_maker
) -> SettlementReport:
    """Проверить и закрыть истекшие аукционы"""
    async with session_maker() as session:
        report = await process_expired_auctions(session)

    if bot is not None:
        await notify_admins_about_failures(bot, report)
    return report


async def scheduler_loop(bot: Optional[Bot] = None):
    """Основной цикл планировщика"""
    while True:
        try:
            await check_and_close_auctions(bot)
        except Exception as e:
            logger.error(f"Ошибка в планировщике: {e}")

        await asyncio.sleep(settings.SCHEDULER_INTERVAL_SECONDS)


def start_scheduler(bot: Optional[Bot] = None) -> asyncio.Task:
    """Запустить планировщик"""
    task = asyncio.create_task(scheduler_loop(bot))
    logger.info("Планировщик закрытия аукционов запущен")
    return task
