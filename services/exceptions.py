"""Ошибки закрытия аукционов"""


class SettlementError(Exception):
    """Базовая ошибка закрытия аукционов"""


class AuthorizationError(SettlementError):
    """Неверный или отсутствующий сервисный ключ"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class FetchError(SettlementError):
    """Не удалось получить истекшие аукционы"""


class PerAuctionUpdateError(SettlementError):
    """Не удалось закрыть конкретный аукцион"""

    def __init__(self, auction_id: str, message: str):
        super().__init__(f"Аукцион {auction_id}: {message}")
        self.auction_id = auction_id
