"""Behaviour shared by every identity store implementation."""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from faceauth.core.exceptions import DuplicateNameError, IdentityStoreError
from faceauth.domain.entities.identity import IdentityChanges, NewIdentity
from faceauth.infrastructure.database import Database, SqlIdentityStore
from faceauth.infrastructure.memory import InMemoryIdentityStore
from tests.factories import make_embedding


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    """Run each test against both store implementations."""
    if request.param == "memory":
        yield InMemoryIdentityStore()
        return

    sql = SqlIdentityStore(Database(f"sqlite+aiosqlite:///{tmp_path / 'faceauth.db'}"))
    await sql.initialize()
    yield sql
    await sql.close()


def new_identity(name: str, seed: int, **kwargs) -> NewIdentity:
    return NewIdentity(name=name, face_descriptor=make_embedding(seed), **kwargs)


class TestIdentityStore:
    """Test suite for IdentityStore implementations."""

    async def test_create_and_get(self, store):
        created = await store.create(new_identity("Ada", 1, profile_image="data:image/png;base64,AAA"))

        fetched = await store.get(created.id)

        assert fetched is not None
        assert fetched.name == "Ada"
        assert fetched.profile_image == "data:image/png;base64,AAA"
        assert fetched.face_descriptor == pytest.approx(make_embedding(1))
        assert fetched.created_at.tzinfo is not None
        assert fetched.last_seen.tzinfo is not None

    async def test_get_missing(self, store):
        assert await store.get("missing") is None

    async def test_get_by_name_is_case_insensitive(self, store):
        created = await store.create(new_identity("Ada Lovelace", 1))
        found = await store.get_by_name("ada lovelace")
        assert found is not None
        assert found.id == created.id
        assert await store.get_by_name("Grace") is None

    async def test_create_enforces_unique_name(self, store):
        await store.create(new_identity("Ada", 1))
        with pytest.raises(DuplicateNameError):
            await store.create(new_identity("ADA", 2))

    async def test_candidates_are_active_and_in_registration_order(self, store):
        first = await store.create(new_identity("Ada", 1))
        await store.create(new_identity("Grace", 2, is_active=False))
        third = await store.create(new_identity("Linus", 3))

        candidates = await store.list_candidates()

        assert [identity_id for identity_id, _ in candidates] == [first.id, third.id]
        assert candidates[0][1] == pytest.approx(make_embedding(1))

    async def test_list_all_orders_by_last_seen(self, store):
        ada = await store.create(new_identity("Ada", 1))
        grace = await store.create(new_identity("Grace", 2))

        await store.touch_last_seen(ada.id, datetime.now(timezone.utc) + timedelta(minutes=5))

        assert [identity.id for identity in await store.list_all()] == [ada.id, grace.id]

    async def test_update_profile_fields(self, store):
        ada = await store.create(new_identity("Ada", 1))

        updated = await store.update(ada.id, IdentityChanges(name="Ada L.", is_active=False))

        assert updated.name == "Ada L."
        assert not updated.is_active
        assert updated.role == "Employee"
        assert await store.get_by_name("ada l.") is not None
        assert await store.list_candidates() == []

    async def test_update_enforces_unique_name(self, store):
        await store.create(new_identity("Ada", 1))
        grace = await store.create(new_identity("Grace", 2))

        with pytest.raises(DuplicateNameError):
            await store.update(grace.id, IdentityChanges(name="ADA"))
        assert (await store.get(grace.id)).name == "Grace"

    async def test_update_missing(self, store):
        assert await store.update("missing", IdentityChanges(role="Admin")) is None

    async def test_touch_last_seen(self, store):
        ada = await store.create(new_identity("Ada", 1))
        seen_at = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

        touched = await store.touch_last_seen(ada.id, seen_at)

        assert touched.last_seen == seen_at
        assert (await store.get(ada.id)).last_seen == seen_at
        assert await store.touch_last_seen("missing", seen_at) is None

    async def test_delete(self, store):
        ada = await store.create(new_identity("Ada", 1))
        assert await store.delete(ada.id)
        assert await store.get(ada.id) is None
        assert not await store.delete(ada.id)

    async def test_recognition_log_and_stats(self, store):
        ada = await store.create(new_identity("Ada", 1))
        entry = await store.add_recognition_log(user_id=ada.id, confidence=91.5, success=True)
        await store.add_recognition_log(user_id=None, confidence=0.0, success=False)

        stats = await store.get_stats(datetime.now(timezone.utc))

        assert entry.user_id == ada.id
        assert entry.timestamp.tzinfo is not None
        assert stats.total_scans == 2
        assert stats.success_rate == 50.0
        assert stats.active_today == 2
        assert stats.total_users == 1
        assert len(stats.daily_stats) == 1
        assert stats.daily_stats[0].scans == 2
        assert stats.daily_stats[0].successful == 1

    async def test_stats_when_empty(self, store):
        stats = await store.get_stats(datetime.now(timezone.utc))
        assert stats.total_scans == 0
        assert stats.success_rate == 0.0
        assert stats.daily_stats == []


async def test_sql_name_constraint_under_concurrent_inserts(sql_store):
    results = await asyncio.gather(
        sql_store.create(new_identity("Ada", 1)),
        sql_store.create(new_identity("ada", 2)),
        return_exceptions=True,
    )
    assert sum(isinstance(r, DuplicateNameError) for r in results) == 1
    assert len(await sql_store.list_all()) == 1


async def test_sql_failures_surface_as_store_errors(tmp_path):
    # Tables are never created, so every query fails
    store = SqlIdentityStore(Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"))
    try:
        with pytest.raises(IdentityStoreError):
            await store.list_candidates()
        with pytest.raises(IdentityStoreError):
            await store.add_recognition_log(user_id=None, confidence=0.0, success=False)
    finally:
        await store.close()
