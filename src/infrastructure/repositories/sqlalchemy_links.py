import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.errors import StorageError
from domain.models import Access, Link, NewLink
from domain.ports import LinkRepository
from infrastructure.db.models import AccessORM, LinkORM
from infrastructure.db.mappers import to_access_model, to_link_model, to_link_orm
from core.error_logger import get_error_reporter

logger = logging.getLogger("links_repo")

# Ключи хранятся как знаковые 64-битные целые
MAX_LINK_ID = 2**63 - 1


class SQLAlchemyLinkRepository(LinkRepository):
    """SQLAlchemy реализация хранилища ссылок и обращений"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._logger = logger

    async def create_link(self, new_link: NewLink) -> Link:
        """Сохранить новую ссылку, id назначает база"""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    orm_obj = to_link_orm(new_link)
                    session.add(orm_obj)
                    await session.flush()
                    link = to_link_model(orm_obj)

            self._logger.debug(
                f"Сохранена ссылка: id={link.id}, author={link.author}, target={link.target}"
            )
            return link
        except SQLAlchemyError as e:
            self._logger.error(f"Ошибка при сохранении ссылки для author={new_link.author}: {e}")
            get_error_reporter().log_storage_error(
                e, "create_link", author=new_link.author, target=new_link.target
            )
            raise StorageError("Failed to create link") from e

    async def get_link(self, link_id: int) -> Optional[Link]:
        """Получить ссылку по id, None если ее нет"""
        if not 0 < link_id <= MAX_LINK_ID:
            return None
        try:
            async with self._session_factory() as session:
                orm_obj = await session.get(LinkORM, link_id)
                if orm_obj:
                    return to_link_model(orm_obj)
                return None
        except SQLAlchemyError as e:
            self._logger.error(f"Ошибка при получении ссылки id={link_id}: {e}")
            get_error_reporter().log_storage_error(e, "get_link", link_id=link_id)
            raise StorageError(f"Failed to load link {link_id}") from e

    async def record_access(self, link_id: int, address: str) -> Access:
        """Записать обращение к ссылке, время назначается при вставке"""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    orm_obj = AccessORM(link_id=link_id, address=address)
                    session.add(orm_obj)
                    await session.flush()
                    access = to_access_model(orm_obj)

            self._logger.debug(f"Записано обращение: id={access.id}, link_id={link_id}, address={address}")
            return access
        except SQLAlchemyError as e:
            self._logger.error(f"Ошибка при записи обращения к ссылке id={link_id}: {e}")
            get_error_reporter().log_storage_error(
                e, "record_access", link_id=link_id, address=address
            )
            raise StorageError(f"Failed to record access to link {link_id}") from e

    async def list_accesses(self, link_id: int) -> list[Access]:
        """Обращения к ссылке в порядке записи"""
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(AccessORM)
                    .where(AccessORM.link_id == link_id)
                    .order_by(AccessORM.accessed_at, AccessORM.id)
                )
                result = await session.execute(stmt)
                return [to_access_model(row) for row in result.scalars()]
        except SQLAlchemyError as e:
            self._logger.error(f"Ошибка при получении обращений к ссылке id={link_id}: {e}")
            get_error_reporter().log_storage_error(e, "list_accesses", link_id=link_id)
            raise StorageError(f"Failed to list accesses of link {link_id}") from e
