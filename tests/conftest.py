import asyncio
from dataclasses import dataclass

import pytest

from domain.errors import ChatDeliveryError, StorageError
from infrastructure.repositories.in_memory_dialogues import InMemoryDialogueStorage
from infrastructure.repositories.in_memory_links import InMemoryLinkRepository
from use_cases import DialogueEngine

HOST = "https://fwd.example.com"


@dataclass
class SentMessage:
    chat_id: int
    text: str
    html: bool


class FakeMessenger:
    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.failing_chat_ids: set[int] = set()
        self.fail_all = False

    async def send_message(self, chat_id: int, text: str, html: bool = False) -> None:
        # Даем другим корутинам вклиниться, как при реальном сетевом вызове
        await asyncio.sleep(0)
        if self.fail_all or chat_id in self.failing_chat_ids:
            raise ChatDeliveryError("telegram is down", chat_id=chat_id)
        self.sent.append(SentMessage(chat_id, text, html))

    def texts_for(self, chat_id: int) -> list[str]:
        return [m.text for m in self.sent if m.chat_id == chat_id]


class FlakyLinkRepository(InMemoryLinkRepository):
    def __init__(self) -> None:
        super().__init__()
        self.fail_create = False
        self.fail_record = False
        self.create_calls = []

    async def create_link(self, new_link):
        self.create_calls.append(new_link)
        if self.fail_create:
            raise StorageError("database is down")
        return await super().create_link(new_link)

    async def record_access(self, link_id, address):
        if self.fail_record:
            raise StorageError("database is down")
        return await super().record_access(link_id, address)


@pytest.fixture
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def link_repo() -> FlakyLinkRepository:
    return FlakyLinkRepository()


@pytest.fixture
def dialogues() -> InMemoryDialogueStorage:
    return InMemoryDialogueStorage()


@pytest.fixture
def engine(dialogues, link_repo, messenger) -> DialogueEngine:
    return DialogueEngine(
        dialogues=dialogues,
        links=link_repo,
        messenger=messenger,
        public_base_url=HOST,
    )
