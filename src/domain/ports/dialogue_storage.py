from __future__ import annotations
from typing import AsyncContextManager, Protocol
from domain.models import DialoguePhase


class DialogueStorage(Protocol):
	"""Хранилище фаз диалога по chat id.

	Доступ к одному чату сериализуется через lock(); разные чаты
	друг друга не блокируют.
	"""

	def lock(self, chat_id: int) -> AsyncContextManager[None]: ...
	async def get_phase(self, chat_id: int) -> DialoguePhase: ...
	async def set_phase(self, chat_id: int, phase: DialoguePhase) -> None: ...
	async def reset(self, chat_id: int) -> None: ...
