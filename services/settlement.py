"""Закрытие истекших аукционов и определение победителей"""
import enum
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from database.models.auction import Auction, AuctionStatus
from database.models.offer import Offer
from services.auction import as_utc, get_expired_auctions
from services.exceptions import AuthorizationError, FetchError, PerAuctionUpdateError
from services.notifications import create_winner_notification
from config import settings

logger = logging.getLogger(__name__)


class SettlementOutcome(str, enum.Enum):
    """Результат закрытия одного аукциона"""
    SETTLED = "settled"  # Закрыт этим запуском
    SKIPPED = "skipped"  # Уже закрыт другим запуском
    FAILED = "failed"  # Ошибка, повтор при следующем запуске


@dataclass
class SettlementReport:
    """Итог одного запуска"""
    fetched: int = 0
    settled: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.fetched

    def record(self, outcome: SettlementOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    def as_dict(self) -> dict:
        return {
            "processed": self.processed,
            "fetched": self.fetched,
            "settled": self.settled,
            "skipped": self.skipped,
            "failed": self.failed,
        }


def authorize_service_request(authorization: Optional[str]) -> None:
    """Проверить заголовок Authorization: Bearer <SERVICE_ROLE_KEY>"""
    secret = settings.SERVICE_ROLE_KEY
    if not secret or not authorization:
        raise AuthorizationError()

    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not hmac.compare_digest(token.encode(), secret.encode()):
        raise AuthorizationError()


def select_winner(offers: Iterable[Offer]) -> Optional[Offer]:
    """Выбрать выигрышное предложение

    Максимальная сумма; при равных суммах побеждает более раннее предложение,
    затем меньший id.
    """
    offers = list(offers)
    if not offers:
        return None
    return min(
        offers,
        key=lambda offer: (-offer.offer_amount, as_utc(offer.created_at), offer.id)
    )


def build_verification_url(auction_id: str, user_id: str) -> str:
    """Ссылка на верификацию победителя"""
    return f"{settings.VERIFICATION_BASE_URL}?bid={auction_id}&user={user_id}"


async def settle_auction(
    session: AsyncSession,
    auction: Auction,
    now: datetime
) -> SettlementOutcome:
    """Закрыть один аукцион

    Обновление выполняется только если аукцион все еще активен, поэтому
    параллельные запуски не закроют его дважды и не отправят второе уведомление.
    """
    # Значения читаем до записи: rollback помечает объекты сессии устаревшими
    auction_id = auction.id
    item_name = auction.item_name
    winner = select_winner(auction.offers)

    values = {"status": AuctionStatus.CLOSED.value}
    payment_deadline = None
    if winner:
        winner_id = winner.user_id
        payment_deadline = now + timedelta(days=settings.PAYMENT_WINDOW_DAYS)
        values.update(
            winner_id=winner_id,
            payment_deadline=payment_deadline,
            verification_url=build_verification_url(auction_id, winner_id)
        )

    try:
        result = await session.execute(
            update(Auction)
            .where(
                Auction.id == auction_id,
                Auction.status == AuctionStatus.ACTIVE.value
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise PerAuctionUpdateError(auction_id, str(e)) from e

    if updated == 0:
        logger.info(f"Аукцион {auction_id} уже закрыт другим запуском, пропускаем")
        return SettlementOutcome.SKIPPED

    if not winner:
        logger.info(f"Аукцион {auction_id} закрыт без предложений")
        return SettlementOutcome.SETTLED

    # Потеря уведомления не отменяет закрытие аукциона
    try:
        await create_winner_notification(session, auction_id, winner_id, item_name, payment_deadline)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Ошибка при создании уведомления для аукциона {auction_id}: {e}")

    logger.info(f"Аукцион {auction_id} закрыт. Победитель: {winner_id}")
    return SettlementOutcome.SETTLED


async def process_expired_auctions(
    session: AsyncSession,
    now: Optional[datetime] = None,
    batch_size: Optional[int] = None
) -> SettlementReport:
    """Закрыть все истекшие активные аукционы"""
    now = now or datetime.now(timezone.utc)
    batch_size = batch_size or settings.SETTLEMENT_BATCH_SIZE
    report = SettlementReport()
    cursor = None

    logger.info("Проверка истекших аукционов...")

    while True:
        try:
            batch = await get_expired_auctions(session, now, batch_size, after=cursor)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Ошибка при получении истекших аукционов: {e}")
            raise FetchError(str(e)) from e

        # Отсоединяем загруженные аукционы, чтобы rollback одного не затронул остальные
        session.expunge_all()
        report.fetched += len(batch)

        for auction in batch:
            try:
                outcome = await settle_auction(session, auction, now)
            except PerAuctionUpdateError as e:
                logger.error(f"Ошибка при закрытии аукциона: {e}")
                outcome = SettlementOutcome.FAILED
            report.record(outcome)

        if len(batch) < batch_size:
            break
        cursor = (batch[-1].ends_at, batch[-1].id)

    logger.info(
        f"Найдено {report.fetched} истекших аукционов: закрыто {report.settled}, "
        f"пропущено {report.skipped}, ошибок {report.failed}"
    )
    return report
