from .store import InMemoryIdentityStore

__all__ = ["InMemoryIdentityStore"]
