from __future__ import annotations
from typing import Protocol


class ChatMessenger(Protocol):
	async def send_message(self, chat_id: int, text: str, html: bool = False) -> None: ...
