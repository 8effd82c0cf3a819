import logging
from typing import Any, Dict, Optional

import httpx
from domain.errors import ChatDeliveryError
from domain.ports import ChatMessenger
from core.config import TelegramSettings
from core.error_logger import get_error_reporter

WEBHOOK_PATH = "/webhooks/telegram"


class TelegramHttpClient(ChatMessenger):
	def __init__(
		self,
		settings: TelegramSettings,
		public_base_url: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		self._logger = logging.getLogger("telegram")
		self._api_base_url = settings.api_base_url.rstrip("/")
		self._webhook_secret = settings.webhook_secret
		self._use_polling = settings.use_polling
		self._request_timeout = settings.request_timeout
		self._public_base_url = public_base_url.rstrip("/") if public_base_url else None
		# Токен входит в путь запроса, поэтому base_url не логируем
		self._client = httpx.AsyncClient(
			base_url=f"{self._api_base_url}/bot{settings.token}",
			timeout=self._request_timeout,
			transport=transport,
		)
		self._logger.info(
			"Telegram client initialized api=%s polling=%s webhook_configured=%s",
			self._api_base_url,
			self._use_polling,
			bool(self._public_base_url),
		)

	@property
	def webhook_url(self) -> Optional[str]:
		if not self._public_base_url:
			return None
		return f"{self._public_base_url}{WEBHOOK_PATH}"

	async def _call(
		self,
		method: str,
		payload: Dict[str, Any],
		timeout: Optional[float] = None,
		chat_id: Optional[int] = None,
	) -> Any:
		"""Вызывает метод Bot API и возвращает поле result"""
		try:
			response = await self._client.post(
				f"/{method}",
				json=payload,
				timeout=timeout if timeout is not None else self._request_timeout,
			)
		except httpx.HTTPError as e:
			self._logger.error("Ошибка соединения с Telegram при вызове %s: %s", method, str(e))
			get_error_reporter().log_delivery_error(e, chat_id=chat_id, method=method)
			raise ChatDeliveryError(f"Telegram {method} failed: {e}", chat_id=chat_id) from e

		try:
			data = response.json()
		except ValueError:
			data = {"ok": False, "description": response.text}

		if response.status_code >= 400 or not data.get("ok"):
			description = data.get("description", "unknown error")
			error = ChatDeliveryError(
				f"Telegram {method} returned {response.status_code}: {description}",
				chat_id=chat_id,
				status_code=response.status_code,
			)
			self._logger.error(
				"Telegram отклонил %s: status=%s, description=%s", method, response.status_code, description
			)
			get_error_reporter().log_delivery_error(
				error,
				chat_id=chat_id,
				method=method,
				status_code=response.status_code,
				error_details=description,
			)
			raise error

		return data.get("result")

	async def send_message(self, chat_id: int, text: str, html: bool = False) -> None:
		payload: Dict[str, Any] = {
			"chat_id": chat_id,
			"text": text,
			"disable_web_page_preview": True,
		}
		if html:
			payload["parse_mode"] = "HTML"

		self._logger.debug("Отправка сообщения в chat_id=%s, html=%s, length=%d", chat_id, html, len(text))
		await self._call("sendMessage", payload, chat_id=chat_id)

	async def set_webhook(self, url: str) -> None:
		payload: Dict[str, Any] = {"url": url, "allowed_updates": ["message"]}
		if self._webhook_secret:
			payload["secret_token"] = self._webhook_secret
		await self._call("setWebhook", payload)
		self._logger.info("Вебхук установлен: %s", url)

	async def delete_webhook(self) -> None:
		await self._call("deleteWebhook", {"drop_pending_updates": False})
		self._logger.info("Вебхук удален")

	async def get_updates(self, offset: Optional[int] = None, timeout: int = 30) -> list[Dict[str, Any]]:
		payload: Dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
		if offset is not None:
			payload["offset"] = offset
		# HTTP таймаут должен быть больше времени long polling
		return await self._call("getUpdates", payload, timeout=timeout + self._request_timeout)

	async def ensure_ready(self) -> None:
		if self._use_polling:
			# getUpdates не работает, пока установлен вебхук
			await self.delete_webhook()
			return

		if not self.webhook_url:
			self._logger.warning(
				"APP_PUBLIC_BASE_URL не задан, вебхук не устанавливается, бот не будет получать сообщения"
			)
			return

		if not self.webhook_url.startswith("https://"):
			self._logger.warning("Telegram принимает только HTTPS вебхуки: %s", self.webhook_url)

		await self.set_webhook(self.webhook_url)

	async def close(self) -> None:
		await self._client.aclose()
