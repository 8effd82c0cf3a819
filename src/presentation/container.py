import logging
from typing import Optional
from fastapi import Request

from core.config import Settings, settings as default_settings
from domain.ports import ChatMessenger, DialogueStorage, LinkRepository
from infrastructure.db.engine import create_database_engine, create_session_factory, init_db
from infrastructure.http_clients.telegram_client import TelegramHttpClient
from infrastructure.repositories.in_memory_dialogues import InMemoryDialogueStorage
from infrastructure.repositories.in_memory_links import InMemoryLinkRepository
from infrastructure.repositories.sqlalchemy_links import SQLAlchemyLinkRepository
from use_cases import DialogueCommands, DialogueEngine, ResolveRedirectUseCase

DEFAULT_PUBLIC_BASE_URL = "http://localhost:8000"


# --- DI Container ---
class Container:
	def __init__(
		self,
		settings: Settings = default_settings,
		link_repo: Optional[LinkRepository] = None,
		messenger: Optional[ChatMessenger] = None,
		dialogues: Optional[DialogueStorage] = None,
	):
		self._logger = logging.getLogger("startup")
		self.settings = settings
		self.engine = None

		if link_repo is None:
			if settings.database.use_sqlalchemy_repos:
				self.engine = create_database_engine(settings.database.url)
				link_repo = SQLAlchemyLinkRepository(create_session_factory(self.engine))
			else:
				link_repo = InMemoryLinkRepository()
		self.link_repo = link_repo

		self.telegram_client: Optional[TelegramHttpClient] = None
		if messenger is None:
			self.telegram_client = TelegramHttpClient(
				settings=settings.telegram,
				public_base_url=settings.app.public_base_url,
			)
			messenger = self.telegram_client
		self.messenger = messenger

		self.dialogues = dialogues or InMemoryDialogueStorage(
			ttl_seconds=settings.app.dialogue_ttl_seconds
		)

		self.dialogue_engine = DialogueEngine(
			dialogues=self.dialogues,
			links=self.link_repo,
			messenger=self.messenger,
			public_base_url=settings.app.public_base_url or DEFAULT_PUBLIC_BASE_URL,
			commands=DialogueCommands(
				shorten=settings.app.shorten_command,
				cancel=settings.app.cancel_command,
			),
		)
		self.resolve_redirect_uc = ResolveRedirectUseCase(
			links=self.link_repo,
			messenger=self.messenger,
			include_headers=settings.app.notify_include_headers,
		)

	async def startup(self) -> None:
		if self.engine is not None:
			await init_db(self.engine)
		if self.telegram_client is not None:
			await self.telegram_client.ensure_ready()

	async def shutdown(self) -> None:
		if self.telegram_client is not None:
			await self.telegram_client.close()
		if self.engine is not None:
			await self.engine.dispose()
		self._logger.info("Ресурсы приложения освобождены")


def get_container(request: Request) -> Container:
	return request.app.state.container
