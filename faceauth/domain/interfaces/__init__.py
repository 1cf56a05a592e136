"""Service interfaces package."""
from .storage import IdentityStore

__all__ = ["IdentityStore"]
