"""Уведомления админам об ошибках закрытия аукционов"""
import logging
from aiogram import Bot
from config import settings
from services.settlement import SettlementReport

logger = logging.getLogger(__name__)


def build_failure_alert(report: SettlementReport) -> str:
    """Текст сообщения для админов"""
    return (
        f"⚠️ Закрытие аукционов завершилось с ошибками\n\n"
        f"Найдено: <b>{report.fetched}</b>\n"
        f"Закрыто: <b>{report.settled}</b>\n"
        f"Пропущено: <b>{report.skipped}</b>\n"
        f"Ошибок: <b>{report.failed}</b>\n\n"
        "Аукционы с ошибками будут обработаны при следующем запуске."
    )


async def notify_admins_about_failures(bot: Bot, report: SettlementReport) -> int:
    """Отправить админам отчет, если были ошибки. Возвращает число отправленных сообщений"""
    if report.failed == 0:
        return 0

    text = build_failure_alert(report)
    sent = 0
    for admin_id in settings.admin_ids_list:
        try:
            await bot.send_message(admin_id, text, parse_mode="HTML")
            sent += 1
        except Exception as e:
            logger.error(f"Ошибка отправки отчета админу {admin_id}: {e}")
    return sent
