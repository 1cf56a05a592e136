"""API router initialization."""
from fastapi import APIRouter

from .identities import router as identities_router
from .recognition import router as recognition_router

router = APIRouter()

router.include_router(
    identities_router,
    prefix="/users",
    tags=["users"]
)
router.include_router(
    recognition_router,
    tags=["recognition"]
)
