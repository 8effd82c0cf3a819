import logging
from core.error_logger import get_error_reporter
from domain.errors import ChatDeliveryError, InternalError
from presentation.container import Container
from presentation.schemas.telegram import TelegramUpdate
from use_cases.mappers.telegram_to_domain import telegram_update_to_domain

GENERIC_FAILURE = "Something went wrong, please try again."

logger = logging.getLogger("telegram_updates")


async def process_update(container: Container, update: TelegramUpdate, source: str = "webhook") -> None:
	"""Передает входящее обновление Telegram в движок диалога.

	Внутренние ошибки не доходят до пользователя в сыром виде: они
	логируются, а пользователь получает общее сообщение и может
	повторить ввод (фаза диалога не меняется).
	"""
	message = telegram_update_to_domain(update)
	if message is None:
		logger.debug("Обновление update_id=%s без сообщения, пропускаем", update.update_id)
		return

	try:
		await container.dialogue_engine.execute(message)
	except InternalError as e:
		logger.exception(
			"Ошибка при обработке update_id=%s для chat_id=%s: %s",
			update.update_id, message.chat_id, str(e)
		)
		get_error_reporter().log_update_processing_error(
			error=e,
			update_id=update.update_id,
			chat_id=message.chat_id,
			source=source,
		)
		try:
			await container.messenger.send_message(message.chat_id, GENERIC_FAILURE)
		except ChatDeliveryError as notify_error:
			logger.error(
				"Не удалось сообщить пользователю chat_id=%s об ошибке: %s",
				message.chat_id, str(notify_error)
			)
