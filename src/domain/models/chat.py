from __future__ import annotations
from typing import Optional
from pydantic import BaseModel


class IncomingChatMessage(BaseModel):
	chat_id: int
	message_id: Optional[int] = None
	# None, если сообщение не текстовое (фото, стикер и т.п.)
	text: Optional[str] = None
	sender_name: Optional[str] = None
