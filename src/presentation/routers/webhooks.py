import logging
import secrets
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from infrastructure.http_clients.telegram_client import WEBHOOK_PATH
from presentation.container import Container, get_container
from presentation.schemas.telegram import TelegramUpdate
from presentation.updates import process_update

router = APIRouter()


class Ok(BaseModel):
	code: str = "ok"


@router.post(WEBHOOK_PATH, response_model=Ok)
async def telegram_webhook(
	update: TelegramUpdate,
	x_telegram_bot_api_secret_token: Optional[str] = Header(None),
	container: Container = Depends(get_container),
):
	"""Receives bot updates pushed by Telegram."""
	logger = logging.getLogger("telegram_webhook")

	expected_secret = container.settings.telegram.webhook_secret
	if expected_secret and not secrets.compare_digest(
		x_telegram_bot_api_secret_token or "", expected_secret
	):
		logger.warning("Вебхук с неверным секретом отклонен: update_id=%s", update.update_id)
		raise HTTPException(status_code=403, detail="Forbidden")

	logger.info(
		"Получено обновление Telegram: update_id=%s, chat_id=%s",
		update.update_id,
		update.message.chat.id if update.message else None,
	)

	await process_update(container, update, source="webhook")
	# Ошибки уже обработаны, отвечаем 200, чтобы Telegram не повторял доставку
	return Ok()
