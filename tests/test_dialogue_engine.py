import asyncio

import pytest

from domain.errors import ChatDeliveryError, StorageError
from domain.models import AwaitingCommand, AwaitingTarget, AwaitingTitle, IncomingChatMessage
from use_cases.dialogue import PLAIN_TEXT_PROMPT, TARGET_PROMPT, TITLE_PROMPT

from conftest import HOST

CHAT = 4242


def msg(text, chat_id=CHAT):
    return IncomingChatMessage(chat_id=chat_id, text=text)


async def converse(engine, *texts, chat_id=CHAT):
    for text in texts:
        await engine.execute(msg(text, chat_id))


def test_full_conversation_creates_link_and_confirms(engine, link_repo, messenger, dialogues):
    asyncio.run(converse(engine, "/shorten", "https://example.org", "My Page"))

    assert len(link_repo.create_calls) == 1
    created = link_repo.create_calls[0]
    assert (created.author, created.target, created.title) == (CHAT, "https://example.org", "My Page")

    texts = messenger.texts_for(CHAT)
    assert texts[:2] == [TARGET_PROMPT, TITLE_PROMPT]
    assert f"{HOST}/1/My Page" in texts[2]
    assert "<code>" in texts[2]
    assert messenger.sent[-1].html is True

    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingCommand()
    assert len(dialogues) == 0


def test_confirmation_escapes_html_in_title(engine, messenger):
    asyncio.run(converse(engine, "/shorten", "example.org", "<b>x</b> & y"))

    confirmation = messenger.sent[-1].text
    assert "&lt;b&gt;x&lt;/b&gt; &amp; y" in confirmation
    assert "<b>" not in confirmation


def test_non_command_text_reprompts_without_state(engine, messenger, dialogues, link_repo):
    asyncio.run(converse(engine, "hello", "what?"))

    assert len(messenger.texts_for(CHAT)) == 2
    assert all("/shorten" in text for text in messenger.texts_for(CHAT))
    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingCommand()
    assert link_repo.create_calls == []


def test_non_text_message_keeps_phase(engine, messenger, dialogues):
    asyncio.run(converse(engine, "/shorten"))
    asyncio.run(engine.execute(msg(None)))

    assert messenger.texts_for(CHAT)[-1] == PLAIN_TEXT_PROMPT
    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingTarget()


def test_cancel_discards_partial_input(engine, dialogues, link_repo):
    asyncio.run(converse(engine, "/shorten", "example.org", "/cancel"))

    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingCommand()
    assert link_repo.create_calls == []


def test_storage_failure_leaves_dialogue_in_title_phase(engine, dialogues, link_repo, messenger):
    asyncio.run(converse(engine, "/shorten", "example.org"))
    link_repo.fail_create = True

    with pytest.raises(StorageError):
        asyncio.run(engine.execute(msg("Title")))

    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingTitle(target="example.org")
    assert len(messenger.sent) == 2

    # Повторная отправка заголовка после восстановления хранилища
    link_repo.fail_create = False
    asyncio.run(engine.execute(msg("Title")))

    assert asyncio.run(link_repo.get_link(1)).title == "Title"
    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingCommand()


def test_send_failure_aborts_transition(engine, dialogues, messenger):
    messenger.fail_all = True

    with pytest.raises(ChatDeliveryError):
        asyncio.run(engine.execute(msg("/shorten")))

    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingCommand()

    messenger.fail_all = False
    asyncio.run(engine.execute(msg("/shorten")))
    assert asyncio.run(dialogues.get_phase(CHAT)) == AwaitingTarget()


def test_interleaved_sessions_do_not_leak(engine, link_repo):
    async def scenario():
        await engine.execute(msg("/shorten", chat_id=1))
        await engine.execute(msg("/shorten", chat_id=2))
        await engine.execute(msg("a.example", chat_id=1))
        await engine.execute(msg("b.example", chat_id=2))
        await engine.execute(msg("Title B", chat_id=2))
        await engine.execute(msg("Title A", chat_id=1))

    asyncio.run(scenario())

    by_author = {call.author: call for call in link_repo.create_calls}
    assert (by_author[1].target, by_author[1].title) == ("a.example", "Title A")
    assert (by_author[2].target, by_author[2].title) == ("b.example", "Title B")


def test_concurrent_sessions_do_not_leak(engine, link_repo):
    chats = range(100, 110)

    async def scenario():
        for step in ("/shorten", "target-{}", "title-{}"):
            await asyncio.gather(
                *(engine.execute(msg(step.format(chat), chat_id=chat)) for chat in chats)
            )

    asyncio.run(scenario())

    assert len(link_repo.create_calls) == len(chats)
    for call in link_repo.create_calls:
        assert call.target == f"target-{call.author}"
        assert call.title == f"title-{call.author}"


def test_messages_of_one_chat_are_processed_in_order(engine, link_repo):
    async def scenario():
        await asyncio.gather(
            engine.execute(msg("/shorten")),
            engine.execute(msg("example.org")),
            engine.execute(msg("Ordered")),
        )

    asyncio.run(scenario())

    assert len(link_repo.create_calls) == 1
    assert link_repo.create_calls[0].target == "example.org"
    assert link_repo.create_calls[0].title == "Ordered"
