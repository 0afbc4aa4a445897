"""Конфигурация приложения"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Настройки приложения"""

    # Database
    # Полный URL имеет приоритет над отдельными параметрами DB_*
    DATABASE_URL: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_NAME: str = ""

    # Сервисный ключ для вызова закрытия аукционов (Authorization: Bearer <ключ>)
    SERVICE_ROLE_KEY: str = ""

    # Telegram Bot (уведомления админам об ошибках закрытия)
    BOT_TOKEN: str = ""
    ADMIN_USER_IDS: str = ""

    # FastAPI
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Settlement Settings
    # Срок оплаты для победителя (в днях)
    PAYMENT_WINDOW_DAYS: int = 7
    VERIFICATION_BASE_URL: str = "https://verifyme.com/verify"
    # Сколько аукционов выбирать за один запрос
    SETTLEMENT_BATCH_SIZE: int = 100

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_INTERVAL_SECONDS: int = 60

    @property
    def admin_ids_list(self) -> List[int]:
        """Список ID администраторов"""
        if not self.ADMIN_USER_IDS:
            return []
        return [int(uid.strip()) for uid in self.ADMIN_USER_IDS.split(",") if uid.strip()]

    @property
    def database_url(self) -> str:
        """URL подключения к базе данных"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
