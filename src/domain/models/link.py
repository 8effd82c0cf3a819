from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class NewLink(BaseModel):
	author: int  # числовой chat id владельца, туда уходят уведомления
	target: str = Field(min_length=1)
	title: str = Field(min_length=1)


class Link(BaseModel):
	id: int
	author: int
	target: str
	title: str


class Access(BaseModel):
	id: int
	link_id: int
	address: str
	accessed_at: datetime
