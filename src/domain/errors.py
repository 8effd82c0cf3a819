from __future__ import annotations


class ShortenerError(Exception):
	"""Базовая ошибка сервиса коротких ссылок"""


class LinkNotFoundError(ShortenerError):
	def __init__(self, link_id: int) -> None:
		super().__init__(f"Link {link_id} not found")
		self.link_id = link_id


class InternalError(ShortenerError):
	"""Сбой хранилища или канала уведомлений"""


class StorageError(InternalError):
	pass


class ChatDeliveryError(InternalError):
	def __init__(self, message: str, chat_id: int | None = None, status_code: int | None = None) -> None:
		super().__init__(message)
		self.chat_id = chat_id
		self.status_code = status_code
