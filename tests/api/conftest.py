"""Fixtures for API tests."""
import pytest
from fastapi.testclient import TestClient

from faceauth.core.config import settings
from faceauth.core.container import ServiceContainer
from faceauth.infrastructure.memory import InMemoryIdentityStore
from faceauth.main import create_app

API = settings.API_PREFIX


@pytest.fixture
def client():
    """Test client backed by a fresh in-memory store."""
    app = create_app(ServiceContainer(settings, identity_store=InMemoryIdentityStore()))
    with TestClient(app) as test_client:
        yield test_client
