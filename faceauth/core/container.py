"""Service container for dependency injection."""
from typing import Optional

from faceauth.core.config import Settings
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.infrastructure.database import Database, SqlIdentityStore
from faceauth.infrastructure.memory import InMemoryIdentityStore
from faceauth.services.face_matching import FaceMatchingService
from faceauth.services.identity import IdentityService

logger = get_logger(__name__)


def build_identity_store(settings: Settings) -> IdentityStore:
    """Instantiate the identity store selected by STORE_BACKEND."""
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        return InMemoryIdentityStore()
    if backend == "sql":
        return SqlIdentityStore(Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO))
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")


class ServiceContainer:
    """Container for application services.

    This container manages the lifecycle and dependencies of all services in the application.
    Each application instance owns its container, so tests can run isolated
    containers side by side.

    Example:
        ```python
        container = ServiceContainer(settings)
        await container.initialize()

        identity_service = container.identity_service
        ```
    """

    def __init__(self, settings: Settings, identity_store: Optional[IdentityStore] = None) -> None:
        """Initialize empty container.

        Args:
            settings: Application settings
            identity_store: Store to use instead of the one chosen by settings
        """
        self.settings = settings
        self.identity_store: Optional[IdentityStore] = identity_store
        self.face_matching_service: Optional[FaceMatchingService] = None
        self.identity_service: Optional[IdentityService] = None

    @property
    def initialized(self) -> bool:
        return self.identity_service is not None

    async def initialize(self) -> None:
        """Initialize all services in the correct order."""
        if self.identity_store is None:
            self.identity_store = build_identity_store(self.settings)
        await self.identity_store.initialize()

        self.face_matching_service = FaceMatchingService(
            auth_policy=self.settings.auth_policy,
            duplicate_policy=self.settings.duplicate_policy,
            dimension=self.settings.EMBEDDING_DIMENSION,
        )
        self.identity_service = IdentityService(
            store=self.identity_store,
            matcher=self.face_matching_service,
        )
        logger.info(
            "Initialized services",
            store=type(self.identity_store).__name__,
            auth_policy=self.settings.auth_policy.model_dump(),
            duplicate_policy=self.settings.duplicate_policy.model_dump(),
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.identity_service = None
        self.face_matching_service = None

        if self.identity_store is not None:
            await self.identity_store.close()
