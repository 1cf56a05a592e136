"""Identity registration and profile endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from faceauth.api.models.identity import (
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    IdentityCreateRequest,
    IdentityResponse,
    IdentityUpdateRequest,
    MessageResponse,
)
from faceauth.core.exceptions import (
    DuplicateFaceError,
    DuplicateNameError,
    EmbeddingValidationError,
    IdentityNotFoundError,
    IdentityStoreError,
)
from faceauth.core.logging import get_logger
from faceauth.infrastructure.dependencies import get_identity_service
from faceauth.services.identity import IdentityService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        422: {"description": "Invalid request"},
        500: {"description": "Internal server error"}
    }
)


@router.get("", response_model=List[IdentityResponse], summary="List identities")
async def list_identities(
    service: IdentityService = Depends(get_identity_service)
) -> List[IdentityResponse]:
    """Return every identity, most recently seen first."""
    try:
        identities = await service.list_identities()
    except Exception as e:
        logger.error("Failed to list identities", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch users")
    return [IdentityResponse.from_identity(identity) for identity in identities]


@router.post(
    "",
    response_model=IdentityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an identity",
    description="Stores a new identity after checking the name and the face for duplicates.",
    responses={
        400: {
            "description": "Name already taken",
            "content": {
                "application/json": {
                    "example": {"detail": "User with this name already exists"}
                }
            },
        },
        409: {
            "description": "Face already registered",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "This face is already registered in the system",
                        "existing_user": "Ada Lovelace",
                    }
                }
            },
        },
    },
)
async def register_identity(
    request: IdentityCreateRequest,
    service: IdentityService = Depends(get_identity_service)
):
    """Register a new identity.

    Args:
        request: Name, embedding and optional profile fields
        service: Identity service provided by dependency injection

    Returns:
        IdentityResponse for the created identity

    Raises:
        HTTPException: If the request is invalid or conflicts with an existing identity
    """
    try:
        identity = await service.register(request.to_domain())
    except EmbeddingValidationError as e:
        logger.warning("Invalid face descriptor on registration", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except DuplicateNameError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateFaceError as e:
        # The conflicting name is surfaced on purpose so the user knows who holds the face
        return JSONResponse(
            status_code=409,
            content={"detail": str(e), "existing_user": e.existing_user},
        )
    except IdentityStoreError as e:
        logger.error("Failed to store identity", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to store user data")
    except Exception as e:
        logger.error("Unexpected error during registration", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create user")

    return IdentityResponse.from_identity(identity)


@router.post(
    "/check-duplicate",
    response_model=DuplicateCheckResponse,
    summary="Check whether a face is already registered",
)
async def check_duplicate(
    request: DuplicateCheckRequest,
    service: IdentityService = Depends(get_identity_service)
) -> DuplicateCheckResponse:
    """Run the registration duplicate check without storing anything."""
    try:
        outcome = await service.check_duplicate(
            request.face_descriptor,
            exclude_identity_id=request.exclude_identity_id,
        )
    except EmbeddingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during duplicate check", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Duplicate check failed")
    return DuplicateCheckResponse.from_service_response(outcome)


@router.get("/{identity_id}", response_model=IdentityResponse, summary="Get an identity")
async def get_identity(
    identity_id: str,
    service: IdentityService = Depends(get_identity_service)
) -> IdentityResponse:
    """Return one identity."""
    try:
        identity = await service.get_identity(identity_id)
    except IdentityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return IdentityResponse.from_identity(identity)


@router.patch("/{identity_id}", response_model=IdentityResponse, summary="Update an identity")
async def update_identity(
    identity_id: str,
    request: IdentityUpdateRequest,
    service: IdentityService = Depends(get_identity_service)
):
    """Update profile fields of an identity.

    Reactivating an identity re-runs the duplicate face check against the
    other active identities and answers 409 on conflict.
    """
    try:
        identity = await service.update_identity(identity_id, request.to_domain())
    except IdentityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateNameError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateFaceError as e:
        return JSONResponse(
            status_code=409,
            content={"detail": str(e), "existing_user": e.existing_user},
        )
    except Exception as e:
        logger.error("Unexpected error during update", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update user")
    return IdentityResponse.from_identity(identity)


@router.delete("/{identity_id}", response_model=MessageResponse, summary="Delete an identity")
async def delete_identity(
    identity_id: str,
    service: IdentityService = Depends(get_identity_service)
) -> MessageResponse:
    """Delete an identity."""
    try:
        await service.delete_identity(identity_id)
    except IdentityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during delete", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete user")
    return MessageResponse(message="User deleted successfully")
