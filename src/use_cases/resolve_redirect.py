from __future__ import annotations
import logging
from typing import Mapping, Optional
from domain.errors import LinkNotFoundError
from domain.models import Link
from domain.ports import ChatMessenger, LinkRepository


def normalize_target(target: str) -> str:
	"""Добавляет https://, если в адресе нет схемы (эвристика по подстроке "http")."""
	if "http" not in target:
		return f"https://{target}"
	return target


def format_access_notification(
	link: Link,
	address: str,
	headers: Optional[Mapping[str, str]] = None,
) -> str:
	text = (
		f"New access on: {link.title}\n\n"
		f"Linking to: {link.target}\n\n"
		f"By address: {address}"
	)
	if headers:
		lines = "\n".join(f"{name}: {value}" for name, value in headers.items())
		text += f"\n\nHeaders:\n{lines}"
	return text


class ResolveRedirectUseCase:
	def __init__(
		self,
		links: LinkRepository,
		messenger: ChatMessenger,
		include_headers: bool = False,
		logger: Optional[logging.Logger] = None,
	) -> None:
		self._links = links
		self._messenger = messenger
		self._include_headers = include_headers
		self._logger = logger or logging.getLogger("redirect")

	async def execute(
		self,
		link_id: int,
		address: str,
		headers: Optional[Mapping[str, str]] = None,
	) -> str:
		"""
		Разрешает короткую ссылку в адрес для редиректа.

		Порядок: поиск ссылки, запись обращения, уведомление владельца,
		нормализация адреса. Редирект без записанного обращения и
		отправленного уведомления не выполняется.

		Raises:
			LinkNotFoundError: ссылки нет, побочных эффектов не было
			StorageError: не удалось прочитать ссылку или записать обращение
			ChatDeliveryError: не удалось уведомить владельца
		"""
		link = await self._links.get_link(link_id)
		if link is None:
			self._logger.info("Ссылка id=%s не найдена (address=%s)", link_id, address)
			raise LinkNotFoundError(link_id)

		access = await self._links.record_access(link.id, address)
		self._logger.info(
			"Обращение id=%s к ссылке id=%s с адреса %s", access.id, link.id, address
		)

		notification = format_access_notification(
			link, address, headers if self._include_headers else None
		)
		await self._messenger.send_message(link.author, notification)

		return normalize_target(link.target)
