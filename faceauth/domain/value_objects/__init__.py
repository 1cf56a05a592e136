"""Value objects package."""
from .matching import DuplicateCheckResult, MatchPolicy, MatchResult

__all__ = ["DuplicateCheckResult", "MatchPolicy", "MatchResult"]
