"""FastAPI dependency providers."""
from fastapi import Depends, Request

from faceauth.core.container import ServiceContainer
from faceauth.core.exceptions import ServiceNotInitializedError
from faceauth.services.identity import IdentityService


def get_container(request: Request) -> ServiceContainer:
    """Dependency provider for the application's ServiceContainer."""
    container = getattr(request.app.state, "container", None)
    if container is None or not container.initialized:
        raise ServiceNotInitializedError("Service container is not initialized")
    return container


def get_identity_service(container: ServiceContainer = Depends(get_container)) -> IdentityService:
    """Provide the identity service.

    Raises:
        ServiceNotInitializedError: If service is not initialized
    """
    if container.identity_service is None:
        raise ServiceNotInitializedError("Identity service not initialized")
    return container.identity_service
