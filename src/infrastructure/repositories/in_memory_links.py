import asyncio
import logging
from datetime import datetime, timezone
from domain.errors import StorageError
from domain.models import Access, Link, NewLink
from domain.ports import LinkRepository


class InMemoryLinkRepository(LinkRepository):
	def __init__(self):
		self._links: dict[int, Link] = {}  # link_id -> Link
		self._accesses: dict[int, list[Access]] = {}  # link_id -> обращения
		self._next_link_id = 1
		self._next_access_id = 1
		self._lock = asyncio.Lock()
		self._logger = logging.getLogger("links_repo")

	async def create_link(self, new_link: NewLink) -> Link:
		async with self._lock:
			link = Link(id=self._next_link_id, **new_link.model_dump())
			self._next_link_id += 1
			self._links[link.id] = link
		self._logger.debug("Сохранена ссылка id=%s, всего ссылок: %d", link.id, len(self._links))
		return link

	async def get_link(self, link_id: int) -> Link | None:
		return self._links.get(link_id)

	async def record_access(self, link_id: int, address: str) -> Access:
		async with self._lock:
			if link_id not in self._links:
				# Аналог внешнего ключа accesses.link_id -> links.id
				raise StorageError(f"Link {link_id} does not exist")
			access = Access(
				id=self._next_access_id,
				link_id=link_id,
				address=address,
				accessed_at=datetime.now(timezone.utc),
			)
			self._next_access_id += 1
			self._accesses.setdefault(link_id, []).append(access)
		self._logger.debug("Записано обращение id=%s к ссылке id=%s", access.id, link_id)
		return access

	async def list_accesses(self, link_id: int) -> list[Access]:
		return list(self._accesses.get(link_id, []))
