import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
from domain.models import AwaitingCommand, DialoguePhase
from domain.ports import DialogueStorage


class InMemoryDialogueStorage(DialogueStorage):
	"""
	Фазы диалогов в памяти процесса.

	Для каждого чата свой asyncio.Lock, поэтому сообщения одного чата
	обрабатываются по очереди, а разные чаты не ждут друг друга.
	Записи, не обновлявшиеся дольше ttl_seconds, удаляются при очередном
	обращении к хранилищу (ttl_seconds=0 отключает удаление).
	"""

	def __init__(self, ttl_seconds: int = 0, clock: Callable[[], float] = time.monotonic):
		self._phases: dict[int, tuple[DialoguePhase, float]] = {}  # chat_id -> (фаза, время обновления)
		self._locks: dict[int, asyncio.Lock] = {}
		self._lock_users: dict[int, int] = {}  # сколько корутин держат или ждут lock чата
		self._ttl_seconds = ttl_seconds
		self._clock = clock
		self._logger = logging.getLogger("dialogue")

	@asynccontextmanager
	async def lock(self, chat_id: int) -> AsyncIterator[None]:
		lock = self._locks.get(chat_id)
		if lock is None:
			lock = self._locks[chat_id] = asyncio.Lock()
		self._lock_users[chat_id] = self._lock_users.get(chat_id, 0) + 1
		try:
			async with lock:
				yield
		finally:
			self._lock_users[chat_id] -= 1
			if not self._lock_users[chat_id]:
				del self._lock_users[chat_id]
				if chat_id not in self._phases:
					del self._locks[chat_id]

	async def get_phase(self, chat_id: int) -> DialoguePhase:
		self._evict_expired()
		entry = self._phases.get(chat_id)
		if entry is None:
			return AwaitingCommand()
		return entry[0]

	async def set_phase(self, chat_id: int, phase: DialoguePhase) -> None:
		self._phases[chat_id] = (phase, self._clock())

	async def reset(self, chat_id: int) -> None:
		self._phases.pop(chat_id, None)

	def __len__(self) -> int:
		return len(self._phases)

	def _evict_expired(self) -> None:
		if not self._ttl_seconds:
			return
		deadline = self._clock() - self._ttl_seconds
		expired = [chat_id for chat_id, (_, updated) in self._phases.items() if updated < deadline]
		for chat_id in expired:
			del self._phases[chat_id]
			if chat_id not in self._lock_users:
				self._locks.pop(chat_id, None)
		if expired:
			self._logger.debug("Удалено устаревших диалогов: %d", len(expired))
