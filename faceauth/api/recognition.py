"""Face recognition and statistics endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceauth.api.models.identity import RecognizeRequest, RecognizeResponse, StatsResponse
from faceauth.core.exceptions import EmbeddingValidationError, IdentityStoreError
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


@router.post(
    "/recognize",
    response_model=RecognizeResponse,
    summary="Recognize a face",
    description="Matches a face embedding against all active identities.",
    responses={
        200: {
            "description": "Recognition attempt processed",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "user": {
                            "id": "550e8400-e29b-41d4-a716-446655440000",
                            "name": "Ada Lovelace",
                            "role": "Employee",
                            "profile_image": None,
                            "is_active": True,
                            "last_seen": "2026-10-17T09:30:00Z",
                            "created_at": "2026-10-01T12:00:00Z",
                        },
                        "confidence": 91.4,
                    }
                }
            },
        },
    },
)
async def recognize(
    request: RecognizeRequest,
    service: IdentityService = Depends(get_identity_service)
) -> RecognizeResponse:
    """Recognize a face embedding.

    Unrecognized faces are a normal 200 response with ``success`` false.

    Raises:
        HTTPException: If the embedding is malformed or processing fails
    """
    try:
        outcome = await service.authenticate(request.face_descriptor)
    except EmbeddingValidationError as e:
        logger.warning("Invalid face descriptor on recognition", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except IdentityStoreError as e:
        logger.error("Failed to read identity store", error=str(e))
        raise HTTPException(status_code=500, detail="Face recognition failed")
    except Exception as e:
        logger.error("Unexpected error during recognition", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Face recognition failed")
    return RecognizeResponse.from_service_response(outcome)


@router.get("/stats", response_model=StatsResponse, summary="Recognition statistics")
async def get_stats(
    service: IdentityService = Depends(get_identity_service)
) -> StatsResponse:
    """Return aggregated recognition statistics."""
    try:
        stats = await service.get_stats()
    except Exception as e:
        logger.error("Failed to compute statistics", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")
    return StatsResponse.from_service_response(stats)
