from __future__ import annotations
from typing import Protocol
from domain.models import NewLink, Link, Access


class LinkRepository(Protocol):
	async def create_link(self, new_link: NewLink) -> Link: ...
	async def get_link(self, link_id: int) -> Link | None: ...
	async def record_access(self, link_id: int, address: str) -> Access: ...
	async def list_accesses(self, link_id: int) -> list[Access]: ...
