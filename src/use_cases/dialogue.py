from __future__ import annotations
import html
import logging
from typing import Optional
from pydantic import BaseModel
from domain.models import (
	AwaitingCommand,
	AwaitingTarget,
	AwaitingTitle,
	CommitLink,
	DialoguePhase,
	IncomingChatMessage,
	Link,
	NewLink,
	Reply,
	Transition,
)
from domain.ports import ChatMessenger, DialogueStorage, LinkRepository


PLAIN_TEXT_PROMPT = "Send me plain text."
NO_COMMAND_PROMPT = "Send me plain text. Use {shorten} to create a short link."
TARGET_PROMPT = "Please send me the Url you want to shorten."
TITLE_PROMPT = "Please send me the title that should display in the link."
CANCELLED_PROMPT = "Cancelled. Send {shorten} to start over."
CONFIRMATION = "Here's your shortened link (tap to copy):\n\n<code>{link}</code>"


class DialogueCommands(BaseModel):
	shorten: str = "/shorten"
	cancel: str = "/cancel"


def _is_command(text: str, command: str) -> bool:
	# В группах Telegram добавляет имя бота: /shorten@my_bot
	# Команда с аргументами (/shorten https://...) командой не считается
	stripped = text.strip()
	if len(stripped.split()) != 1:
		return False
	return stripped == command or stripped.startswith(command + "@")


def decide(
	phase: DialoguePhase,
	text: Optional[str],
	commands: DialogueCommands = DialogueCommands(),
) -> Transition:
	"""Чистая функция переходов диалога: (фаза, ввод) -> (новая фаза, эффект).

	Не текст (или пустой текст) никогда не меняет фазу. Сохранение ссылки
	откладывается до последней фазы, поэтому адрес без заголовка не
	порождает записей в хранилище.
	"""
	if text is None or not text.strip():
		return Transition(phase=phase, effect=Reply(text=PLAIN_TEXT_PROMPT))

	if _is_command(text, commands.cancel):
		return Transition(
			phase=AwaitingCommand(),
			effect=Reply(text=CANCELLED_PROMPT.format(shorten=commands.shorten)),
		)

	if isinstance(phase, AwaitingCommand):
		if _is_command(text, commands.shorten):
			return Transition(phase=AwaitingTarget(), effect=Reply(text=TARGET_PROMPT))
		return Transition(
			phase=phase,
			effect=Reply(text=NO_COMMAND_PROMPT.format(shorten=commands.shorten)),
		)

	if isinstance(phase, AwaitingTarget):
		return Transition(phase=AwaitingTitle(target=text), effect=Reply(text=TITLE_PROMPT))

	if isinstance(phase, AwaitingTitle):
		return Transition(
			phase=AwaitingCommand(),
			effect=CommitLink(target=phase.target, title=text),
		)

	raise TypeError(f"Unknown dialogue phase: {phase!r}")


def compose_short_link(public_base_url: str, link: Link) -> str:
	return f"{public_base_url.rstrip('/')}/{link.id}/{link.title}"


class DialogueEngine:
	"""
	Ведет диалог создания короткой ссылки в рамках одного чата.

	Фаза сохраняется только после того, как ответное сообщение принято
	Telegram. Ошибки хранилища и отправки пробрасываются вызывающему коду,
	фаза диалога при этом остается прежней, и пользователь может повторить ввод.
	"""

	def __init__(
		self,
		dialogues: DialogueStorage,
		links: LinkRepository,
		messenger: ChatMessenger,
		public_base_url: str,
		commands: DialogueCommands | None = None,
		logger: Optional[logging.Logger] = None,
	) -> None:
		self._dialogues = dialogues
		self._links = links
		self._messenger = messenger
		self._public_base_url = public_base_url
		self._commands = commands or DialogueCommands()
		self._logger = logger or logging.getLogger("dialogue")

	async def execute(self, message: IncomingChatMessage) -> Transition:
		chat_id = message.chat_id
		async with self._dialogues.lock(chat_id):
			phase = await self._dialogues.get_phase(chat_id)
			transition = decide(phase, message.text, self._commands)
			self._logger.debug(
				"chat_id=%s: %s -> %s (%s)",
				chat_id, phase.kind, transition.phase.kind, type(transition.effect).__name__
			)

			effect = transition.effect
			if isinstance(effect, CommitLink):
				link = await self._links.create_link(
					NewLink(author=chat_id, target=effect.target, title=effect.title)
				)
				short_link = compose_short_link(self._public_base_url, link)
				self._logger.info(
					"Создана ссылка id=%s для chat_id=%s: %s", link.id, chat_id, short_link
				)
				await self._messenger.send_message(
					chat_id,
					CONFIRMATION.format(link=html.escape(short_link, quote=False)),
					html=True,
				)
				await self._dialogues.reset(chat_id)
				return transition

			await self._messenger.send_message(chat_id, effect.text, html=effect.html)
			if isinstance(transition.phase, AwaitingCommand):
				await self._dialogues.reset(chat_id)
			else:
				await self._dialogues.set_phase(chat_id, transition.phase)
			return transition
