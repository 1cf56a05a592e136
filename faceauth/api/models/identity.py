"""API specific identity and recognition models."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from faceauth.domain.entities.identity import (
    DailyRecognitionStats,
    Identity,
    IdentityChanges,
    NewIdentity,
    RecognitionStats,
)
from faceauth.services.models import DuplicateCheckOutcome, RecognitionOutcome

MAX_NAME_LENGTH = 100


class IdentityResponse(BaseModel):
    """API model for an identity. The stored embedding is never returned."""
    id: str = Field(..., description="Unique identity identifier")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Role label")
    profile_image: Optional[str] = Field(None, description="Profile image reference or data URL")
    is_active: bool = Field(..., description="Whether the identity can be recognized")
    last_seen: Optional[datetime] = Field(None, description="Last successful authentication")
    created_at: Optional[datetime] = Field(None, description="Registration timestamp")

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityResponse":
        """Create an API response from a domain Identity."""
        return cls(
            id=identity.id,
            name=identity.name,
            role=identity.role,
            profile_image=identity.profile_image,
            is_active=identity.is_active,
            last_seen=identity.last_seen,
            created_at=identity.created_at,
        )


class IdentityCreateRequest(BaseModel):
    """Request model for registering an identity."""
    name: str = Field(
        ...,
        description="Display name, unique case-insensitively",
        min_length=1, max_length=MAX_NAME_LENGTH, pattern=r"\S"
    )
    role: str = Field("Employee", description="Role label", max_length=100)
    face_descriptor: List[float] = Field(..., description="Face embedding (128 values)")
    profile_image: Optional[str] = Field(None, description="Profile image reference or data URL")
    is_active: bool = Field(True, description="Whether the identity can be recognized")

    def to_domain(self) -> NewIdentity:
        """Convert to the domain registration model."""
        return NewIdentity(**self.model_dump())


class IdentityUpdateRequest(BaseModel):
    """Request model for updating profile fields. Embeddings cannot be changed."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH, pattern=r"\S")
    role: Optional[str] = Field(None, max_length=100)
    profile_image: Optional[str] = None
    is_active: Optional[bool] = None

    def to_domain(self) -> IdentityChanges:
        """Convert to domain changes, keeping only fields sent by the client."""
        return IdentityChanges(**self.model_dump(exclude_unset=True))


class RecognizeRequest(BaseModel):
    """Request model for the /recognize endpoint."""
    face_descriptor: List[float] = Field(..., description="Face embedding (128 values)")


class RecognizeResponse(BaseModel):
    """Response model for the /recognize endpoint."""
    success: bool = Field(..., description="Whether the face was recognized")
    user: Optional[IdentityResponse] = Field(None, description="Recognized identity")
    confidence: float = Field(..., description="Confidence score (0-100)", ge=0.0, le=100.0)

    @classmethod
    def from_service_response(cls, outcome: RecognitionOutcome) -> "RecognizeResponse":
        """Convert the service layer outcome to the API response model."""
        return cls(
            success=outcome.success,
            user=IdentityResponse.from_identity(outcome.identity) if outcome.identity else None,
            confidence=outcome.confidence,
        )


class DuplicateCheckRequest(BaseModel):
    """Request model for the duplicate check endpoint."""
    face_descriptor: List[float] = Field(..., description="Face embedding (128 values)")
    exclude_identity_id: Optional[str] = Field(None, description="Identity to leave out of the check")


class DuplicateCheckResponse(BaseModel):
    """Response model for the duplicate check endpoint."""
    duplicate_found: bool
    matched_identity_id: Optional[str] = None
    existing_user: Optional[str] = None
    confidence: float = Field(..., ge=0.0, le=100.0)

    @classmethod
    def from_service_response(cls, outcome: DuplicateCheckOutcome) -> "DuplicateCheckResponse":
        """Convert the service layer outcome to the API response model."""
        return cls(**outcome.model_dump())


class StatsResponse(BaseModel):
    """Response model for the /stats endpoint."""
    total_scans: int
    success_rate: float
    active_today: int
    total_users: int
    daily_stats: List[DailyRecognitionStats]

    @classmethod
    def from_service_response(cls, stats: RecognitionStats) -> "StatsResponse":
        """Convert domain statistics to the API response model."""
        return cls(**stats.model_dump())


class MessageResponse(BaseModel):
    """Plain message response."""
    message: str
