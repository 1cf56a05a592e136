"""Face matching service exposing the recognize and duplicate-check operations."""
from typing import Any, Iterable, Optional

from faceauth.core.logging import get_logger
from faceauth.domain.value_objects.matching import DuplicateCheckResult, MatchPolicy, MatchResult
from faceauth.services.matching import (
    EMBEDDING_DIMENSION,
    CandidatePair,
    find_best_match,
    validate_embedding,
)

logger = get_logger(__name__)


class FaceMatchingService:
    """Service binding the match evaluator to the two call-site policies.

    Authentication and registration duplicate detection share one evaluator
    but are configured independently: the authentication policy is usually
    lenient, the duplicate policy strict. The service keeps no candidate
    state; callers pass a fresh snapshot of the identity store on every call.

    Example:
        ```python
        matcher = FaceMatchingService(
            auth_policy=settings.auth_policy,
            duplicate_policy=settings.duplicate_policy,
        )
        candidates = await store.list_candidates()
        result = matcher.recognize(embedding, candidates)
        ```
    """

    def __init__(
        self,
        auth_policy: MatchPolicy,
        duplicate_policy: MatchPolicy,
        dimension: int = EMBEDDING_DIMENSION,
    ) -> None:
        """Initialize the face matching service.

        Args:
            auth_policy: Policy used by recognize
            duplicate_policy: Policy used by check_duplicate
            dimension: Required length of query embeddings
        """
        self.auth_policy = auth_policy
        self.duplicate_policy = duplicate_policy
        self.dimension = dimension

    def recognize(self, query: Any, candidates: Iterable[CandidatePair]) -> MatchResult:
        """Identify the person behind a query embedding.

        Args:
            query: Raw query embedding
            candidates: (identity_id, embedding) pairs of active identities

        Returns:
            MatchResult for the authentication policy

        Raises:
            EmbeddingValidationError: If the query embedding is malformed
        """
        vector = validate_embedding(query, self.dimension)
        result = find_best_match(vector, candidates, self.auth_policy)
        logger.info(
            "Evaluated authentication match",
            matched=result.matched,
            identity_id=result.identity_id,
            confidence=round(result.confidence, 2),
            distance=result.distance,
        )
        return result

    def check_duplicate(
        self,
        query: Any,
        candidates: Iterable[CandidatePair],
        exclude_identity_id: Optional[str] = None,
    ) -> DuplicateCheckResult:
        """Check whether a face is already registered.

        Args:
            query: Raw query embedding
            candidates: (identity_id, embedding) pairs of active identities
            exclude_identity_id: Identity to leave out of the pool, e.g. the
                one being updated

        Returns:
            DuplicateCheckResult for the duplicate-detection policy

        Raises:
            EmbeddingValidationError: If the query embedding is malformed
        """
        vector = validate_embedding(query, self.dimension)
        pool = (
            (identity_id, embedding)
            for identity_id, embedding in candidates
            if exclude_identity_id is None or identity_id != exclude_identity_id
        )
        result = find_best_match(vector, pool, self.duplicate_policy)
        if result.matched:
            logger.info(
                "Duplicate face detected",
                matched_identity_id=result.identity_id,
                confidence=round(result.confidence, 2),
                distance=result.distance,
            )
        return DuplicateCheckResult(
            duplicate_found=result.matched,
            matched_identity_id=result.identity_id,
            confidence=result.confidence,
        )
