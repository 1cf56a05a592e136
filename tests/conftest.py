"""Shared fixtures."""
import pytest

from faceauth.core.logging import setup_logging
from faceauth.domain.value_objects.matching import MatchPolicy
from faceauth.infrastructure.database import Database, SqlIdentityStore
from faceauth.infrastructure.memory import InMemoryIdentityStore
from faceauth.services.face_matching import FaceMatchingService
from faceauth.services.identity import IdentityService

setup_logging()


@pytest.fixture
def auth_policy() -> MatchPolicy:
    return MatchPolicy(distance_threshold=0.6, similarity_threshold=0.8, minimum_confidence=0)


@pytest.fixture
def duplicate_policy() -> MatchPolicy:
    return MatchPolicy(distance_threshold=0.5, similarity_threshold=0.85, minimum_confidence=85)


@pytest.fixture
def matcher(auth_policy, duplicate_policy) -> FaceMatchingService:
    return FaceMatchingService(auth_policy=auth_policy, duplicate_policy=duplicate_policy)


@pytest.fixture
def memory_store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
async def sql_store(tmp_path):
    """SQL store on a throwaway SQLite file."""
    store = SqlIdentityStore(Database(f"sqlite+aiosqlite:///{tmp_path / 'faceauth.db'}"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def identity_service(memory_store, matcher) -> IdentityService:
    return IdentityService(store=memory_store, matcher=matcher)
