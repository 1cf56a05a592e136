"""Identity service: registration, authentication and profile management."""
import asyncio
from datetime import datetime, timezone
from typing import Any, List, Optional

from faceauth.core.exceptions import (
    DuplicateFaceError,
    DuplicateNameError,
    IdentityNotFoundError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import (
    Identity,
    IdentityChanges,
    NewIdentity,
    RecognitionStats,
)
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.services.face_matching import FaceMatchingService
from faceauth.services.matching import validate_embedding
from faceauth.services.models import DuplicateCheckOutcome, RecognitionOutcome

logger = get_logger(__name__)


class IdentityService:
    """Service wiring the face matcher to an identity store.

    This service:
    1. Registers identities after a name check and a duplicate face check
    2. Authenticates faces, updating last-seen and the recognition log
    3. Manages profile data and reports recognition statistics

    Registration is check-then-insert, so concurrent registrations are
    serialized with a lock. Stores may add a uniqueness constraint on top.
    """

    def __init__(self, store: IdentityStore, matcher: FaceMatchingService) -> None:
        """Initialize the identity service.

        Args:
            store: Identity store supplying candidates and persisting identities
            matcher: Face matching service holding the call-site policies
        """
        self.store = store
        self.matcher = matcher
        self._registration_lock = asyncio.Lock()

    async def register(self, data: NewIdentity) -> Identity:
        """Register a new identity.

        Args:
            data: Name, embedding and optional profile fields

        Returns:
            Identity: The stored identity

        Raises:
            EmbeddingValidationError: If the embedding is malformed
            DuplicateNameError: If the name is already taken
            DuplicateFaceError: If the face is already registered
        """
        validate_embedding(data.face_descriptor, self.matcher.dimension)
        data = data.model_copy(update={"name": data.name.strip()})

        async with self._registration_lock:
            if await self.store.get_by_name(data.name) is not None:
                logger.info("Registration rejected, name taken", name=data.name)
                raise DuplicateNameError(
                    "User with this name already exists",
                    details={"name": data.name},
                )

            await self._ensure_face_is_unique(data.face_descriptor, name=data.name)
            identity = await self.store.create(data)

        logger.info("Registered identity", identity_id=identity.id, name=identity.name)
        return identity

    async def _ensure_face_is_unique(
        self,
        face_descriptor: Any,
        name: str,
        exclude_identity_id: Optional[str] = None,
    ) -> None:
        """Raise DuplicateFaceError if another active identity holds this face.

        Must be called with the registration lock held.
        """
        duplicate = await self.check_duplicate(face_descriptor, exclude_identity_id)
        if not duplicate.duplicate_found:
            return

        logger.info(
            "Face already registered to another active identity",
            name=name,
            existing_identity_id=duplicate.matched_identity_id,
        )
        raise DuplicateFaceError(
            "This face is already registered in the system",
            details={
                "existing_user": duplicate.existing_user,
                "identity_id": duplicate.matched_identity_id,
                "confidence": duplicate.confidence,
            },
        )

    async def check_duplicate(
        self,
        face_descriptor: Any,
        exclude_identity_id: Optional[str] = None,
    ) -> DuplicateCheckOutcome:
        """Check a face against every active identity.

        Args:
            face_descriptor: Raw query embedding
            exclude_identity_id: Identity to leave out of the comparison

        Returns:
            DuplicateCheckOutcome including the conflicting identity's name
        """
        candidates = await self.store.list_candidates()
        result = self.matcher.check_duplicate(face_descriptor, candidates, exclude_identity_id)

        existing_user = None
        if result.duplicate_found and result.matched_identity_id is not None:
            existing = await self.store.get(result.matched_identity_id)
            existing_user = existing.name if existing else None

        return DuplicateCheckOutcome(
            duplicate_found=result.duplicate_found,
            matched_identity_id=result.matched_identity_id,
            existing_user=existing_user,
            confidence=result.confidence,
        )

    async def authenticate(self, face_descriptor: Any) -> RecognitionOutcome:
        """Recognize a face and record the attempt.

        Args:
            face_descriptor: Raw query embedding

        Returns:
            RecognitionOutcome: success flag, identity and rounded confidence

        Raises:
            EmbeddingValidationError: If the embedding is malformed
        """
        candidates = await self.store.list_candidates()
        result = self.matcher.recognize(face_descriptor, candidates)

        identity: Optional[Identity] = None
        if result.matched and result.identity_id is not None:
            identity = await self.store.touch_last_seen(result.identity_id, _utcnow())
            if identity is None:
                logger.warning(
                    "Matched identity disappeared before last-seen update",
                    identity_id=result.identity_id,
                )

        success = identity is not None
        confidence = result.confidence if success else 0.0
        await self.store.add_recognition_log(
            user_id=identity.id if identity else None,
            confidence=confidence,
            success=success,
        )

        logger.info(
            "Recognition attempt",
            success=success,
            identity_id=identity.id if identity else None,
            confidence=round(confidence, 1),
        )
        return RecognitionOutcome(
            success=success,
            identity=identity,
            confidence=round(confidence, 1),
        )

    async def list_identities(self) -> List[Identity]:
        """Return all identities, most recently seen first."""
        return await self.store.list_all()

    async def get_identity(self, identity_id: str) -> Identity:
        """Return one identity.

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        identity = await self.store.get(identity_id)
        if identity is None:
            raise IdentityNotFoundError("User not found", details={"identity_id": identity_id})
        return identity

    async def update_identity(self, identity_id: str, changes: IdentityChanges) -> Identity:
        """Update profile fields of an identity.

        Args:
            identity_id: Identity to update
            changes: Fields to change; unset fields are left alone

        Returns:
            Identity: The updated identity

        Raises:
            IdentityNotFoundError: If the identity does not exist
            DuplicateNameError: If the new name belongs to another identity
            DuplicateFaceError: If reactivating would give two active
                identities the same face
        """
        if changes.name is not None:
            changes = changes.model_copy(update={"name": changes.name.strip()})

        async with self._registration_lock:
            if changes.name is not None:
                existing = await self.store.get_by_name(changes.name)
                if existing is not None and existing.id != identity_id:
                    raise DuplicateNameError(
                        "User with this name already exists",
                        details={"name": changes.name},
                    )

            if changes.is_active:
                current = await self.store.get(identity_id)
                if current is not None and not current.is_active:
                    await self._ensure_face_is_unique(
                        current.face_descriptor,
                        name=current.name,
                        exclude_identity_id=identity_id,
                    )

            identity = await self.store.update(identity_id, changes)

        if identity is None:
            raise IdentityNotFoundError("User not found", details={"identity_id": identity_id})
        logger.info("Updated identity", identity_id=identity_id)
        return identity

    async def delete_identity(self, identity_id: str) -> None:
        """Delete an identity.

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        if not await self.store.delete(identity_id):
            raise IdentityNotFoundError("User not found", details={"identity_id": identity_id})
        logger.info("Deleted identity", identity_id=identity_id)

    async def get_stats(self) -> RecognitionStats:
        """Return recognition statistics as of now."""
        return await self.store.get_stats(_utcnow())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
