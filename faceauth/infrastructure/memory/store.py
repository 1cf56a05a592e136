"""In-memory identity store for tests and single-process demos."""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from faceauth.core.exceptions import DuplicateNameError
from faceauth.domain.entities.identity import (
    STATS_WINDOW_DAYS,
    Identity,
    IdentityChanges,
    NewIdentity,
    RecognitionLogEntry,
    RecognitionStats,
    success_rate,
    summarize_daily,
)
from faceauth.domain.interfaces.storage.identity_store import Candidate, IdentityStore

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryIdentityStore(IdentityStore):
    """Dict-backed identity store. Data is lost when the process exits."""

    def __init__(self) -> None:
        self._identities: Dict[str, Identity] = {}
        self._logs: List[RecognitionLogEntry] = []

    async def get(self, identity_id: str) -> Optional[Identity]:
        return self._identities.get(identity_id)

    async def get_by_name(self, name: str) -> Optional[Identity]:
        key = name.strip().lower()
        for identity in self._identities.values():
            if identity.name.lower() == key:
                return identity
        return None

    async def list_all(self) -> List[Identity]:
        return sorted(
            self._identities.values(),
            key=lambda identity: identity.last_seen or _EPOCH,
            reverse=True,
        )

    async def list_candidates(self) -> List[Candidate]:
        # dicts keep insertion order, which is registration order
        return [
            (identity.id, list(identity.face_descriptor))
            for identity in self._identities.values()
            if identity.is_active
        ]

    async def create(self, data: NewIdentity) -> Identity:
        if await self.get_by_name(data.name) is not None:
            raise DuplicateNameError("User with this name already exists", details={"name": data.name})

        now = datetime.now(timezone.utc)
        identity = Identity(
            id=str(uuid.uuid4()),
            name=data.name,
            role=data.role,
            face_descriptor=list(data.face_descriptor),
            profile_image=data.profile_image,
            is_active=data.is_active,
            last_seen=now,
            created_at=now,
        )
        self._identities[identity.id] = identity
        return identity

    async def update(self, identity_id: str, changes: IdentityChanges) -> Optional[Identity]:
        identity = self._identities.get(identity_id)
        if identity is None:
            return None

        if changes.name is not None:
            existing = await self.get_by_name(changes.name)
            if existing is not None and existing.id != identity_id:
                raise DuplicateNameError(
                    "User with this name already exists",
                    details={"name": changes.name},
                )

        updated = identity.model_copy(update=changes.model_dump(exclude_unset=True))
        self._identities[identity_id] = updated
        return updated

    async def touch_last_seen(self, identity_id: str, seen_at: datetime) -> Optional[Identity]:
        identity = self._identities.get(identity_id)
        if identity is None:
            return None

        updated = identity.model_copy(update={"last_seen": seen_at})
        self._identities[identity_id] = updated
        return updated

    async def delete(self, identity_id: str) -> bool:
        return self._identities.pop(identity_id, None) is not None

    async def add_recognition_log(
        self,
        user_id: Optional[str],
        confidence: float,
        success: bool,
    ) -> RecognitionLogEntry:
        entry = RecognitionLogEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            confidence=confidence,
            success=success,
            timestamp=datetime.now(timezone.utc),
        )
        self._logs.append(entry)
        return entry

    async def get_stats(self, now: datetime) -> RecognitionStats:
        total = len(self._logs)
        successful = sum(1 for entry in self._logs if entry.success)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        window_start = now - timedelta(days=STATS_WINDOW_DAYS)

        return RecognitionStats(
            total_scans=total,
            success_rate=success_rate(total, successful),
            active_today=sum(1 for entry in self._logs if entry.timestamp >= midnight),
            total_users=len(self._identities),
            daily_stats=summarize_daily(
                (entry.timestamp, entry.success)
                for entry in self._logs
                if entry.timestamp >= window_start
            ),
        )
