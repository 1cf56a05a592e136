"""Face matching value objects."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

WEIGHT_TOLERANCE = 1e-6


class MatchPolicy(BaseModel):
    """Named bundle of thresholds and weights governing one matching decision.

    A candidate is eligible only when its Euclidean distance is below
    ``distance_threshold`` and its cosine similarity is above
    ``similarity_threshold``. Confidence is a weighted blend of both metrics,
    capped at ``max_confidence``; a non-zero ``minimum_confidence`` rejects
    matches whose blended score falls below it.
    """
    model_config = ConfigDict(frozen=True)

    distance_threshold: float = Field(0.6, gt=0.0, description="Maximum Euclidean distance (exclusive)")
    similarity_threshold: float = Field(0.8, ge=-1.0, le=1.0, description="Minimum cosine similarity (exclusive)")
    minimum_confidence: float = Field(0.0, ge=0.0, le=100.0, description="Confidence floor (0 disables it)")
    distance_weight: float = Field(0.3, ge=0.0, le=1.0, description="Blend weight of the distance score")
    similarity_weight: float = Field(0.7, ge=0.0, le=1.0, description="Blend weight of the similarity score")
    max_confidence: float = Field(95.0, ge=0.0, le=100.0, description="Upper bound of the confidence score")

    @model_validator(mode="after")
    def check_consistency(self) -> "MatchPolicy":
        """Weights must sum to one and the floor must not exceed the cap."""
        if abs(self.distance_weight + self.similarity_weight - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError("distance_weight and similarity_weight must sum to 1")
        if self.minimum_confidence > self.max_confidence:
            raise ValueError("minimum_confidence cannot exceed max_confidence")
        return self


class MatchResult(BaseModel):
    """Outcome of evaluating one query embedding against a candidate pool."""
    matched: bool = Field(..., description="Whether a confident match was found")
    identity_id: Optional[str] = Field(None, description="Identifier of the matched identity")
    confidence: float = Field(0.0, ge=0.0, le=100.0, description="Confidence score (0-100)")
    distance: Optional[float] = Field(None, description="Euclidean distance of the selected candidate")
    similarity: Optional[float] = Field(None, description="Cosine similarity of the selected candidate")

    @classmethod
    def no_match(cls) -> "MatchResult":
        """Build the normal "nothing matched" outcome."""
        return cls(matched=False, identity_id=None, confidence=0.0)


class DuplicateCheckResult(BaseModel):
    """Outcome of the registration-time duplicate face check."""
    duplicate_found: bool = Field(..., description="Whether the face is already registered")
    matched_identity_id: Optional[str] = Field(None, description="Identity the face is registered under")
    confidence: float = Field(0.0, ge=0.0, le=100.0, description="Confidence score (0-100)")
