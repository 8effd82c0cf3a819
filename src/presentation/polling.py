import asyncio
import logging
import os
import signal
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from core.error_logger import get_error_reporter
from domain.errors import ChatDeliveryError
from infrastructure.http_clients.telegram_client import TelegramHttpClient
from presentation.schemas.telegram import TelegramUpdate

UpdateHandler = Callable[[TelegramUpdate], Awaitable[None]]


class TelegramPollingListener:
	"""
	Получает обновления через getUpdates (long polling) вместо вебхука.

	Ошибки обработки отдельного обновления логируются и не останавливают
	цикл. Ошибки сети при getUpdates повторяются с паузой retry_delay.
	"""

	def __init__(
		self,
		client: TelegramHttpClient,
		handle_update: UpdateHandler,
		timeout: int = 30,
		retry_delay: float = 5.0,
		logger: Optional[logging.Logger] = None,
	) -> None:
		self._client = client
		self._handle_update = handle_update
		self._timeout = timeout
		self._retry_delay = retry_delay
		self._offset: Optional[int] = None
		self._logger = logger or logging.getLogger("telegram_polling")

	async def poll_once(self) -> int:
		"""Один запрос getUpdates; возвращает число обработанных обновлений"""
		raw_updates = await self._client.get_updates(offset=self._offset, timeout=self._timeout)
		for raw in raw_updates:
			# Подтверждаем обновление даже при ошибке, иначе оно придет снова
			self._offset = int(raw["update_id"]) + 1
			try:
				update = TelegramUpdate.model_validate(raw)
			except ValidationError as e:
				self._logger.warning("Некорректное обновление update_id=%s: %s", raw.get("update_id"), e)
				continue

			try:
				await self._handle_update(update)
			except Exception as e:
				self._logger.exception("Ошибка при обработке update_id=%s", update.update_id)
				get_error_reporter().log_update_processing_error(
					error=e,
					update_id=update.update_id,
					chat_id=update.message.chat.id if update.message else None,
					source="polling",
				)
		return len(raw_updates)

	async def run(self) -> None:
		self._logger.info("Запущен long polling Telegram (timeout=%s)", self._timeout)
		while True:
			try:
				await self.poll_once()
			except ChatDeliveryError as e:
				self._logger.warning(
					"getUpdates не удался: %s, повтор через %.1f с", str(e), self._retry_delay
				)
				await asyncio.sleep(self._retry_delay)


def stop_process_when_done(task: asyncio.Task) -> None:
	"""Останавливает процесс, если фоновый слушатель завершился сам.

	Без слушателя бот перестает получать сообщения, поэтому лучше
	завершиться и дать супервизору перезапустить сервис.
	"""
	if task.cancelled():
		return
	logger = logging.getLogger("telegram_polling")
	error = task.exception()
	if error is not None:
		logger.critical("Слушатель Telegram упал: %r, завершаем процесс", error)
		get_error_reporter().log_error(
			error, {"task": task.get_name()}, "Listener crashed", include_traceback=False
		)
	else:
		logger.critical("Слушатель Telegram неожиданно завершился, завершаем процесс")
	os.kill(os.getpid(), signal.SIGTERM)
