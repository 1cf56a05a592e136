"""SQL identity store package."""
from .repositories import SqlIdentityStore
from .session import Database

__all__ = ["Database", "SqlIdentityStore"]
