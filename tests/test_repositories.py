"""
Tests for the credential store and task repository against a temp SQLite file.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from auth.password import verify_password
from database.errors import EmailAlreadyRegistered, StoreError
from database.session import Database
from database.tasks import TaskRepository
from database.users import UserStore


class TestUserStore:
    @pytest.mark.asyncio
    async def test_register_and_find(self, session):
        store = UserStore(session, bcrypt_rounds=4)
        user_id = await store.register("a", "a@x.com", "p1")
        await session.commit()

        user = await store.find_by_email("a@x.com")
        assert user is not None
        assert user.id == user_id
        assert user.username == "a"
        assert user.password != "p1"
        assert verify_password("p1", user.password)

    @pytest.mark.asyncio
    async def test_find_is_exact_match(self, session):
        store = UserStore(session, bcrypt_rounds=4)
        await store.register("a", "a@x.com", "p1")
        await session.commit()
        assert await store.find_by_email("A@x.com") is None
        assert await store.find_by_email("missing@x.com") is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, session):
        store = UserStore(session, bcrypt_rounds=4)
        first_id = await store.register("a", "a@x.com", "p1")
        await session.commit()

        with pytest.raises(EmailAlreadyRegistered):
            await store.register("b", "a@x.com", "p2")
        assert issubclass(EmailAlreadyRegistered, StoreError)

        user = await store.find_by_email("a@x.com")
        assert user is not None
        assert user.id == first_id
        assert user.username == "a"


class TestTaskRepository:
    @pytest.mark.asyncio
    async def test_create_is_committed(self, settings, session):
        task = await TaskRepository(session).create("t1", "d1")

        async with Database(settings.database_url) as other:
            async with other.session_factory() as fresh:
                stored = await TaskRepository(fresh).get(task.id)
        assert stored is not None
        assert stored.title == "t1"

    @pytest.mark.asyncio
    async def test_commit_failure_raises_store_error(self, session):
        repo = TaskRepository(session)
        locked = OperationalError("COMMIT", {}, Exception("database is locked"))
        with patch("sqlalchemy.ext.asyncio.AsyncSession.commit", side_effect=locked):
            with pytest.raises(StoreError):
                await repo.create("t1", "d1")
        assert await repo.list_all() == []

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamp(self, session):
        repo = TaskRepository(session)
        task = await repo.create("t1", "d1")
        await session.commit()
        assert task.id is not None
        assert task.created_at is not None
        assert task.to_dict()["createdAt"] is not None

    @pytest.mark.asyncio
    async def test_list_all_in_id_order(self, session):
        repo = TaskRepository(session)
        first = await repo.create("t1", "d1")
        second = await repo.create("t2", "d2")
        await session.commit()
        tasks = await repo.list_all()
        assert [t.id for t in tasks] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_timestamp(self, session):
        repo = TaskRepository(session)
        task = await repo.create("t1", "d1")
        await session.commit()
        created_at = task.created_at

        assert await repo.update(task.id, "t2", "d2") == 1
        await session.commit()

        updated = await repo.get(task.id)
        assert updated.title == "t2"
        assert updated.description == "d2"
        assert updated.created_at == created_at

    @pytest.mark.asyncio
    async def test_delete(self, session):
        repo = TaskRepository(session)
        task = await repo.create("t1", "d1")
        await session.commit()

        assert await repo.delete(task.id) == 1
        await session.commit()
        assert await repo.get(task.id) is None
        assert await repo.list_all() == []

    @pytest.mark.asyncio
    async def test_missing_id_is_a_noop(self, session):
        repo = TaskRepository(session)
        assert await repo.update(999, "t", "d") == 0
        assert await repo.delete(999) == 0
