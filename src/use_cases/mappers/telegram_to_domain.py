from typing import Optional
from domain.models import IncomingChatMessage
from presentation.schemas.telegram import TelegramUpdate


def telegram_update_to_domain(update: TelegramUpdate) -> Optional[IncomingChatMessage]:
	# Правки сообщений, callback'и и прочие типы обновлений в диалоге не участвуют
	message = update.message
	if message is None:
		return None

	sender_name = None
	if message.from_user:
		sender_name = message.from_user.username or message.from_user.first_name

	return IncomingChatMessage(
		chat_id=message.chat.id,  # автор ссылки - именно чат, а не имя пользователя
		message_id=message.message_id,
		text=message.text,
		sender_name=sender_name,
	)
