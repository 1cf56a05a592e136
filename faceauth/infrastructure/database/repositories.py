"""SQL-backed identity store."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from faceauth.core.exceptions import DuplicateNameError
from faceauth.core.logging import get_logger
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
from faceauth.infrastructure.database.models import IdentityRecord, RecognitionLogRecord
from faceauth.infrastructure.database.session import Database

logger = get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_identity(record: IdentityRecord) -> Identity:
    return Identity(
        id=record.id,
        name=record.name,
        role=record.role,
        face_descriptor=record.face_descriptor,
        profile_image=record.profile_image,
        is_active=record.is_active,
        last_seen=_as_utc(record.last_seen),
        created_at=_as_utc(record.created_at),
    )


def _to_log_entry(record: RecognitionLogRecord) -> RecognitionLogEntry:
    return RecognitionLogEntry(
        id=record.id,
        user_id=record.user_id,
        confidence=record.confidence,
        success=record.success,
        timestamp=_as_utc(record.timestamp),
    )


class SqlIdentityStore(IdentityStore):
    """Identity store on top of an async SQLAlchemy database.

    The unique ``name_key`` column backs up the service-level name check when
    several processes register at the same time.
    """

    def __init__(self, database: Database) -> None:
        """Initialize store.

        Args:
            database: Database owning the engine and session factory
        """
        self._db = database

    async def initialize(self) -> None:
        await self._db.create_all()

    async def close(self) -> None:
        await self._db.dispose()

    async def _get_record(self, session, identity_id: str) -> Optional[IdentityRecord]:
        stmt = select(IdentityRecord).where(IdentityRecord.id == identity_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, identity_id: str) -> Optional[Identity]:
        async with self._db.session() as session:
            record = await self._get_record(session, identity_id)
            return _to_identity(record) if record else None

    async def get_by_name(self, name: str) -> Optional[Identity]:
        async with self._db.session() as session:
            stmt = select(IdentityRecord).where(IdentityRecord.name_key == name.strip().lower())
            result = await session.execute(stmt)
            record = result.scalar_one_or_none()
            return _to_identity(record) if record else None

    async def list_all(self) -> List[Identity]:
        async with self._db.session() as session:
            stmt = select(IdentityRecord).order_by(
                IdentityRecord.last_seen.desc(),
                IdentityRecord.pk
            )
            result = await session.execute(stmt)
            return [_to_identity(record) for record in result.scalars().all()]

    async def list_candidates(self) -> List[Candidate]:
        async with self._db.session() as session:
            stmt = (
                select(IdentityRecord.id, IdentityRecord.face_descriptor)
                .where(IdentityRecord.is_active.is_(True))
                .order_by(IdentityRecord.pk)
            )
            result = await session.execute(stmt)
            return [(identity_id, descriptor) for identity_id, descriptor in result.all()]

    async def create(self, data: NewIdentity) -> Identity:
        now = datetime.now(timezone.utc)
        record = IdentityRecord(
            name=data.name,
            name_key=data.name.strip().lower(),
            role=data.role,
            face_descriptor=[float(value) for value in data.face_descriptor],
            profile_image=data.profile_image,
            is_active=data.is_active,
            last_seen=now,
            created_at=now,
        )
        async with self._db.session() as session:
            session.add(record)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning("Name uniqueness constraint violated", name=data.name)
                raise DuplicateNameError(
                    "User with this name already exists",
                    details={"name": data.name}
                ) from e
            return _to_identity(record)

    async def update(self, identity_id: str, changes: IdentityChanges) -> Optional[Identity]:
        async with self._db.session() as session:
            record = await self._get_record(session, identity_id)
            if record is None:
                return None

            for field, value in changes.model_dump(exclude_unset=True).items():
                setattr(record, field, value)
                if field == "name":
                    record.name_key = value.strip().lower()

            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateNameError(
                    "User with this name already exists",
                    details={"name": changes.name}
                ) from e
            return _to_identity(record)

    async def touch_last_seen(self, identity_id: str, seen_at: datetime) -> Optional[Identity]:
        async with self._db.session() as session:
            record = await self._get_record(session, identity_id)
            if record is None:
                return None
            record.last_seen = seen_at
            await session.commit()
            return _to_identity(record)

    async def delete(self, identity_id: str) -> bool:
        async with self._db.session() as session:
            record = await self._get_record(session, identity_id)
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
            return True

    async def add_recognition_log(
        self,
        user_id: Optional[str],
        confidence: float,
        success: bool,
    ) -> RecognitionLogEntry:
        record = RecognitionLogRecord(
            user_id=user_id,
            confidence=confidence,
            success=success,
            timestamp=datetime.now(timezone.utc),
        )
        async with self._db.session() as session:
            session.add(record)
            await session.commit()
            return _to_log_entry(record)

    async def get_stats(self, now: datetime) -> RecognitionStats:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        window_start = now - timedelta(days=STATS_WINDOW_DAYS)

        async with self._db.session() as session:
            total = await session.scalar(select(func.count(RecognitionLogRecord.id)))
            successful = await session.scalar(
                select(func.count(RecognitionLogRecord.id))
                .where(RecognitionLogRecord.success.is_(True))
            )
            active_today = await session.scalar(
                select(func.count(RecognitionLogRecord.id))
                .where(RecognitionLogRecord.timestamp >= midnight)
            )
            total_users = await session.scalar(select(func.count(IdentityRecord.pk)))
            window = await session.execute(
                select(RecognitionLogRecord.timestamp, RecognitionLogRecord.success)
                .where(RecognitionLogRecord.timestamp >= window_start)
            )
            attempts = [(_as_utc(timestamp), success) for timestamp, success in window.all()]

        return RecognitionStats(
            total_scans=total or 0,
            success_rate=success_rate(total or 0, successful or 0),
            active_today=active_today or 0,
            total_users=total_users or 0,
            daily_stats=summarize_daily(attempts),
        )
