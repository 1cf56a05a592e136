"""Tests for settings and policy construction."""
import pytest

from faceauth.core.config import Settings
from faceauth.core.container import ServiceContainer, build_identity_store
from faceauth.infrastructure.database import SqlIdentityStore
from faceauth.infrastructure.memory import InMemoryIdentityStore


def test_default_policies_differ_per_call_site():
    settings = Settings()

    assert settings.auth_policy.minimum_confidence == 0
    assert settings.duplicate_policy.minimum_confidence == 85
    assert settings.duplicate_policy.distance_threshold < settings.auth_policy.distance_threshold
    assert settings.EMBEDDING_DIMENSION == 128


def test_policies_read_environment(monkeypatch):
    monkeypatch.setenv("AUTH_DISTANCE_THRESHOLD", "0.45")
    monkeypatch.setenv("DUPLICATE_MIN_CONFIDENCE", "90")

    settings = Settings()

    assert settings.auth_policy.distance_threshold == 0.45
    assert settings.duplicate_policy.minimum_confidence == 90


def test_invalid_weights_are_rejected(monkeypatch):
    monkeypatch.setenv("DISTANCE_WEIGHT", "0.5")
    with pytest.raises(ValueError):
        Settings().auth_policy


def test_cors_origins_are_split():
    settings = Settings(ALLOWED_ORIGINS="http://a.test, http://b.test")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_build_identity_store_backends(tmp_path):
    assert isinstance(build_identity_store(Settings(STORE_BACKEND="memory")), InMemoryIdentityStore)
    sql = build_identity_store(
        Settings(STORE_BACKEND="sql", DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    )
    assert isinstance(sql, SqlIdentityStore)
    with pytest.raises(ValueError):
        build_identity_store(Settings(STORE_BACKEND="redis"))


async def test_container_lifecycle(tmp_path):
    container = ServiceContainer(
        Settings(STORE_BACKEND="sql", DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
    )
    assert not container.initialized

    await container.initialize()
    assert container.initialized
    assert container.identity_service.matcher is container.face_matching_service

    await container.cleanup()
    assert not container.initialized
