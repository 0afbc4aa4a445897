"""Подключение к базе данных"""
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from config import settings

# Базовый класс для моделей
Base = declarative_base()


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Создать фабрику сессий для движка"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False
    )


# Движок не подключается к БД до первого запроса
engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True
)

async_session_maker = create_session_maker(engine)


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Создать таблицы (для локального запуска и тестов)"""
    # Импорт регистрирует модели в metadata
    import database.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncSession:
    """Получить сессию базы данных"""
    async with async_session_maker() as session:
        yield session
