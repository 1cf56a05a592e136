"""Identity store interface."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from ...entities.identity import (
    Identity,
    IdentityChanges,
    NewIdentity,
    RecognitionLogEntry,
    RecognitionStats,
)

Candidate = Tuple[str, List[float]]


class IdentityStore(ABC):
    """Interface for persisting identities and recognition logs."""

    async def initialize(self) -> None:
        """Prepare the backing storage (create tables, open pools)."""

    async def close(self) -> None:
        """Release backing storage resources."""

    @abstractmethod
    async def get(self, identity_id: str) -> Optional[Identity]:
        """Return the identity with the given id, or None."""
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Identity]:
        """Return the identity whose name matches case-insensitively, or None."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Identity]:
        """Return every identity, most recently seen first."""
        pass

    @abstractmethod
    async def list_candidates(self) -> List[Candidate]:
        """
        Return the matching pool.

        Returns:
            (identity_id, embedding) pairs of active identities in registration order
        """
        pass

    @abstractmethod
    async def create(self, data: NewIdentity) -> Identity:
        """
        Persist a new identity.

        Raises:
            DuplicateNameError: If the name is already taken
        """
        pass

    @abstractmethod
    async def update(self, identity_id: str, changes: IdentityChanges) -> Optional[Identity]:
        """Apply profile changes, returning the updated identity or None if missing."""
        pass

    @abstractmethod
    async def touch_last_seen(self, identity_id: str, seen_at: datetime) -> Optional[Identity]:
        """Set the last-seen timestamp, returning the updated identity or None if missing."""
        pass

    @abstractmethod
    async def delete(self, identity_id: str) -> bool:
        """Delete an identity. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def add_recognition_log(
        self,
        user_id: Optional[str],
        confidence: float,
        success: bool,
    ) -> RecognitionLogEntry:
        """Append a recognition attempt to the log."""
        pass

    @abstractmethod
    async def get_stats(self, now: datetime) -> RecognitionStats:
        """
        Aggregate recognition statistics.

        Args:
            now: Reference time used for "today" and the 7 day window
        """
        pass
