import asyncio

import pytest
from sqlalchemy import delete

from domain.errors import StorageError
from domain.models import NewLink
from infrastructure.db.engine import create_database_engine, create_session_factory, init_db
from infrastructure.db.models import LinkORM
from infrastructure.repositories.sqlalchemy_links import SQLAlchemyLinkRepository


def run_with_repo(scenario):
    async def runner():
        engine = create_database_engine("sqlite+aiosqlite:///:memory:")
        try:
            await init_db(engine)
            repo = SQLAlchemyLinkRepository(create_session_factory(engine))
            return await scenario(repo)
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def test_create_and_get_link():
    async def scenario(repo):
        created = await repo.create_link(
            NewLink(author=123456789012, target="https://example.org", title="My Page")
        )
        loaded = await repo.get_link(created.id)
        return created, loaded

    created, loaded = run_with_repo(scenario)

    assert created.id == 1
    assert loaded == created
    assert loaded.author == 123456789012


def test_ids_are_assigned_sequentially():
    async def scenario(repo):
        first = await repo.create_link(NewLink(author=1, target="a.example", title="a"))
        second = await repo.create_link(NewLink(author=1, target="a.example", title="a"))
        return first.id, second.id

    first_id, second_id = run_with_repo(scenario)

    assert second_id > first_id


def test_get_missing_link_returns_none():
    async def scenario(repo):
        return await repo.get_link(9999)

    assert run_with_repo(scenario) is None


def test_record_access_assigns_id_and_timestamp():
    async def scenario(repo):
        link = await repo.create_link(NewLink(author=1, target="example.org", title="t"))
        first = await repo.record_access(link.id, "203.0.113.7")
        second = await repo.record_access(link.id, "198.51.100.1")
        return link, first, second, await repo.list_accesses(link.id)

    link, first, second, accesses = run_with_repo(scenario)

    assert first.link_id == link.id
    assert first.accessed_at is not None
    assert first.id != second.id
    assert [a.address for a in accesses] == ["203.0.113.7", "198.51.100.1"]


def test_record_access_for_unknown_link_violates_foreign_key():
    async def scenario(repo):
        with pytest.raises(StorageError):
            await repo.record_access(9999, "203.0.113.7")
        return await repo.list_accesses(9999)

    assert run_with_repo(scenario) == []


def test_init_db_creates_directory_for_file_database(tmp_path):
    db_file = tmp_path / "nested" / "app.db"

    async def scenario():
        engine = create_database_engine(f"sqlite+aiosqlite:///{db_file}")
        try:
            await init_db(engine)
            repo = SQLAlchemyLinkRepository(create_session_factory(engine))
            return await repo.create_link(NewLink(author=5, target="example.org", title="t"))
        finally:
            await engine.dispose()

    link = asyncio.run(scenario())

    assert link.id == 1
    assert db_file.exists()


@pytest.mark.parametrize("link_id", [0, -1, 2**63, 10**20])
def test_get_link_outside_id_range_returns_none(link_id):
    async def scenario(repo):
        await repo.create_link(NewLink(author=1, target="example.org", title="t"))
        return await repo.get_link(link_id)

    assert run_with_repo(scenario) is None


def test_ids_of_deleted_links_are_not_reused():
    async def scenario():
        engine = create_database_engine("sqlite+aiosqlite:///:memory:")
        try:
            await init_db(engine)
            session_factory = create_session_factory(engine)
            repo = SQLAlchemyLinkRepository(session_factory)
            first = await repo.create_link(NewLink(author=1, target="a.example", title="a"))
            async with session_factory() as session:
                async with session.begin():
                    await session.execute(delete(LinkORM).where(LinkORM.id == first.id))
            second = await repo.create_link(NewLink(author=1, target="b.example", title="b"))
            return first.id, second.id, await repo.get_link(first.id)
        finally:
            await engine.dispose()

    first_id, second_id, old_link = asyncio.run(scenario())

    assert second_id > first_id
    assert old_link is None
