"""Service-specific models.

This module contains models used by services that are independent of the API layer.
"""
from typing import Optional

from pydantic import BaseModel, Field

from faceauth.domain.entities.identity import Identity


class RecognitionOutcome(BaseModel):
    """Result of one authentication attempt as reported to callers."""
    success: bool = Field(..., description="Whether the face was recognized")
    identity: Optional[Identity] = Field(None, description="Recognized identity, None on failure")
    confidence: float = Field(..., description="Confidence rounded to one decimal (0-100)")


class DuplicateCheckOutcome(BaseModel):
    """Duplicate check enriched with the conflicting identity's name."""
    duplicate_found: bool = Field(..., description="Whether the face is already registered")
    matched_identity_id: Optional[str] = Field(None, description="Conflicting identity identifier")
    existing_user: Optional[str] = Field(None, description="Conflicting identity name")
    confidence: float = Field(..., description="Confidence score (0-100)")
