from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


# Подмножество объектов Telegram Bot API, остальные поля игнорируются
class TelegramUser(BaseModel):
	id: int
	is_bot: bool = False
	first_name: str = ""
	last_name: Optional[str] = None
	username: Optional[str] = None


class TelegramChat(BaseModel):
	id: int
	type: str = "private"
	title: Optional[str] = None
	username: Optional[str] = None


class TelegramMessage(BaseModel):
	message_id: int
	date: int
	chat: TelegramChat
	from_user: Optional[TelegramUser] = Field(default=None, alias="from")
	text: Optional[str] = None
	caption: Optional[str] = None


class TelegramUpdate(BaseModel):
	update_id: int
	message: Optional[TelegramMessage] = None
	edited_message: Optional[TelegramMessage] = None
