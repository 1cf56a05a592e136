"""Core identity domain entities."""
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """A registered person together with their stored face embedding."""
    id: str = Field(..., description="Unique identity identifier")
    name: str = Field(..., description="Display name, unique case-insensitively")
    role: str = Field("Employee", description="Free-form role label")
    face_descriptor: List[float] = Field(..., description="Stored face embedding")
    profile_image: Optional[str] = Field(None, description="Profile image reference or data URL")
    is_active: bool = Field(True, description="Inactive identities never match")
    last_seen: Optional[datetime] = Field(None, description="Last successful authentication")
    created_at: Optional[datetime] = Field(None, description="Registration timestamp")


class NewIdentity(BaseModel):
    """Data required to register a new identity."""
    name: str
    role: str = "Employee"
    face_descriptor: List[float]
    profile_image: Optional[str] = None
    is_active: bool = True


class IdentityChanges(BaseModel):
    """Mutable profile fields. The stored embedding is never updated."""
    name: Optional[str] = None
    role: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: Optional[bool] = None


class RecognitionLogEntry(BaseModel):
    """Append-only record of one authentication attempt."""
    id: str = Field(..., description="Log entry identifier")
    user_id: Optional[str] = Field(None, description="Matched identity, None on failure")
    confidence: float = Field(..., description="Confidence reported for the attempt")
    success: bool = Field(..., description="Whether the attempt matched an identity")
    timestamp: datetime = Field(..., description="When the attempt happened (UTC)")


class DailyRecognitionStats(BaseModel):
    """Recognition counts for a single day."""
    day: date
    scans: int
    successful: int


class RecognitionStats(BaseModel):
    """Aggregated recognition statistics."""
    total_scans: int = 0
    success_rate: float = 0.0
    active_today: int = 0
    total_users: int = 0
    daily_stats: List[DailyRecognitionStats] = Field(default_factory=list)


STATS_WINDOW_DAYS = 7


def summarize_daily(attempts: Iterable[Tuple[datetime, bool]]) -> List[DailyRecognitionStats]:
    """
    Group recognition attempts by calendar day.

    Args:
        attempts: (timestamp, success) pairs, already limited to the window

    Returns:
        One entry per day that had attempts, oldest first
    """
    buckets: Dict[date, List[int]] = defaultdict(lambda: [0, 0])
    for timestamp, success in attempts:
        counts = buckets[timestamp.date()]
        counts[0] += 1
        if success:
            counts[1] += 1
    return [
        DailyRecognitionStats(day=day, scans=scans, successful=successful)
        for day, (scans, successful) in sorted(buckets.items())
    ]


def success_rate(total: int, successful: int) -> float:
    """Percentage of successful attempts, one decimal."""
    return round(successful / total * 100, 1) if total > 0 else 0.0
