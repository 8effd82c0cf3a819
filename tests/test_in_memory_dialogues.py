import asyncio

from domain.models import AwaitingCommand, AwaitingTarget, AwaitingTitle
from infrastructure.repositories.in_memory_dialogues import InMemoryDialogueStorage


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_unknown_chat_starts_awaiting_command():
    storage = InMemoryDialogueStorage()

    assert asyncio.run(storage.get_phase(1)) == AwaitingCommand()


def test_set_and_reset_phase():
    storage = InMemoryDialogueStorage()

    async def scenario():
        await storage.set_phase(1, AwaitingTitle(target="example.org"))
        await storage.set_phase(2, AwaitingTarget())
        first = await storage.get_phase(1)
        await storage.reset(1)
        return first, await storage.get_phase(1), await storage.get_phase(2)

    first, after_reset, other = asyncio.run(scenario())

    assert first == AwaitingTitle(target="example.org")
    assert after_reset == AwaitingCommand()
    assert other == AwaitingTarget()


def test_idle_dialogues_expire():
    clock = FakeClock()
    storage = InMemoryDialogueStorage(ttl_seconds=60, clock=clock)

    asyncio.run(storage.set_phase(1, AwaitingTarget()))
    clock.now += 30
    asyncio.run(storage.set_phase(2, AwaitingTarget()))
    clock.now += 45

    assert asyncio.run(storage.get_phase(1)) == AwaitingCommand()
    assert asyncio.run(storage.get_phase(2)) == AwaitingTarget()
    assert len(storage) == 1


def test_zero_ttl_never_expires():
    clock = FakeClock()
    storage = InMemoryDialogueStorage(ttl_seconds=0, clock=clock)

    asyncio.run(storage.set_phase(1, AwaitingTarget()))
    clock.now += 10 ** 9

    assert asyncio.run(storage.get_phase(1)) == AwaitingTarget()


def test_lock_serializes_one_chat_but_not_others():
    storage = InMemoryDialogueStorage()
    events = []

    async def hold(chat_id, name, delay):
        async with storage.lock(chat_id):
            events.append(f"{name}:start")
            await asyncio.sleep(delay)
            events.append(f"{name}:end")

    async def scenario():
        await asyncio.gather(
            hold(1, "a1", 0.05),
            hold(1, "a2", 0),
            hold(2, "b", 0),
        )

    asyncio.run(scenario())

    # Чат 2 не ждет чат 1, второй вход в чат 1 ждет первого
    assert events.index("b:end") < events.index("a1:end")
    assert events.index("a1:end") < events.index("a2:start")


def test_locks_are_released_for_finished_dialogues():
    storage = InMemoryDialogueStorage()

    async def scenario():
        async with storage.lock(7):
            await storage.set_phase(7, AwaitingTarget())
        async with storage.lock(7):
            await storage.reset(7)

    asyncio.run(scenario())

    assert storage._locks == {}
    assert storage._lock_users == {}
