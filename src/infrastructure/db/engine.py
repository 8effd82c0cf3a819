import logging
from pathlib import Path
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from .models import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(db_url: str) -> bool:
    url = make_url(db_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_database_engine(db_url: str) -> AsyncEngine:
    """Создает асинхронный движок SQLAlchemy"""
    kwargs = {}
    if _is_memory_sqlite(db_url):
        # Одно соединение на весь процесс, иначе каждая сессия видит пустую базу
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(
        db_url,
        echo=False,  # Установить True для отладки SQL запросов
        **kwargs,
    )

    if make_url(db_url).get_backend_name() == "sqlite":
        # Без foreign_keys=ON SQLite не проверяет accesses.link_id
        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if not _is_memory_sqlite(db_url):
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

    return engine


async def init_db(engine: AsyncEngine) -> None:
    """Инициализирует базу данных - создает все таблицы"""
    try:
        logger.info("Инициализация базы данных...")

        url = engine.url
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("База данных успешно инициализирована")
    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        raise


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Создает фабрику асинхронных сессий"""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
