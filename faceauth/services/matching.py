"""Match evaluator: picks the single best stored embedding for a query.

A candidate is eligible only if it is both close (Euclidean distance below
the policy threshold) and aligned (cosine similarity above the policy
threshold). The closest eligible candidate wins; among equally close
candidates the first one in input order is kept. The winner's confidence is
a weighted blend of both metrics, capped by the policy, and a non-zero
minimum confidence can still reject it.

Example:
    ```python
    policy = MatchPolicy(distance_threshold=0.5, similarity_threshold=0.8)
    result = find_best_match(query, [("user-1", stored)], policy)
    if result.matched:
        print(result.identity_id, result.confidence)
    ```
"""
import numbers
from typing import Any, Iterable, Optional, Tuple

import numpy as np

from faceauth.core.exceptions import EmbeddingValidationError
from faceauth.core.logging import get_logger
from faceauth.domain.value_objects.matching import MatchPolicy, MatchResult
from faceauth.services.similarity import Vector, as_vector, cosine_similarity, euclidean_distance

logger = get_logger(__name__)

EMBEDDING_DIMENSION = 128

CandidatePair = Tuple[str, Any]


def validate_embedding(value: Any, dimension: int = EMBEDDING_DIMENSION) -> np.ndarray:
    """
    Validate a query embedding and convert it to a float64 array.

    Args:
        value: Raw embedding, typically a list of numbers from a request body
        dimension: Required number of components

    Returns:
        np.ndarray: The embedding as a flat float64 array

    Raises:
        EmbeddingValidationError: If the value is missing, not a sequence of
            finite real numbers, or not exactly ``dimension`` long
    """
    if value is None:
        raise EmbeddingValidationError("Face embedding is required")

    if isinstance(value, np.ndarray):
        if value.ndim != 1 or value.dtype.kind not in "iuf":
            raise EmbeddingValidationError("Face embedding must be a flat array of numbers")
    elif isinstance(value, (list, tuple)):
        if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in value):
            raise EmbeddingValidationError("Face embedding must contain only numbers")
    else:
        raise EmbeddingValidationError(
            "Face embedding must be an array of numbers",
            details={"received_type": type(value).__name__},
        )

    if len(value) != dimension:
        raise EmbeddingValidationError(
            f"Face embedding must have exactly {dimension} values",
            details={"expected": dimension, "received": len(value)},
        )

    vector = as_vector(value)
    if not np.all(np.isfinite(vector)):
        raise EmbeddingValidationError("Face embedding contains non-finite values")
    return vector


def _comparable_vector(embedding: Any, dimension: int) -> Optional[np.ndarray]:
    """Return the candidate embedding as an array, or None if it cannot be compared."""
    try:
        return validate_embedding(embedding, dimension)
    except EmbeddingValidationError:
        return None


def compute_confidence(distance: float, similarity: float, policy: MatchPolicy) -> float:
    """
    Blend distance and similarity into a bounded confidence score.

    Args:
        distance: Euclidean distance of the candidate
        similarity: Cosine similarity of the candidate
        policy: Policy supplying the threshold, weights and cap

    Returns:
        float: Confidence in [0, policy.max_confidence]
    """
    distance_score = max(0.0, (1.0 - distance / policy.distance_threshold) * 100.0)
    similarity_score = similarity * 100.0
    confidence = distance_score * policy.distance_weight + similarity_score * policy.similarity_weight
    return min(max(confidence, 0.0), policy.max_confidence)


def find_best_match(
    query: Vector,
    candidates: Iterable[CandidatePair],
    policy: MatchPolicy,
) -> MatchResult:
    """
    Find the single best eligible candidate for a query embedding.

    Args:
        query: Validated query embedding
        candidates: Ordered (identity_id, embedding) pairs, possibly empty
        policy: Thresholds and weights for this decision

    Returns:
        MatchResult: The selected identity with its confidence, or a no-match
            result with confidence 0. Incomparable candidates are skipped.
    """
    query_vector = as_vector(query)
    dimension = query_vector.shape[0]

    best_id: Optional[str] = None
    best_distance = 0.0
    best_similarity = 0.0
    evaluated = 0
    skipped = 0

    for identity_id, embedding in candidates:
        vector = _comparable_vector(embedding, dimension)
        if vector is None:
            skipped += 1
            logger.warning("Skipping incomparable stored embedding", identity_id=identity_id)
            continue

        evaluated += 1
        distance = euclidean_distance(query_vector, vector)
        similarity = cosine_similarity(query_vector, vector)

        if not (distance < policy.distance_threshold and similarity > policy.similarity_threshold):
            continue

        # Strict comparison keeps the earliest of equally close candidates
        if best_id is None or distance < best_distance:
            best_id = identity_id
            best_distance = distance
            best_similarity = similarity

    if best_id is None:
        logger.debug("No eligible candidate", evaluated=evaluated, skipped=skipped)
        return MatchResult.no_match()

    confidence = compute_confidence(best_distance, best_similarity, policy)
    if policy.minimum_confidence > 0 and confidence < policy.minimum_confidence:
        logger.debug(
            "Best candidate below minimum confidence",
            identity_id=best_id,
            confidence=confidence,
            minimum_confidence=policy.minimum_confidence,
        )
        return MatchResult.no_match()

    return MatchResult(
        matched=True,
        identity_id=best_id,
        confidence=confidence,
        distance=best_distance,
        similarity=best_similarity,
    )
