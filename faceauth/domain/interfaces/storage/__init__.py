from .identity_store import Candidate, IdentityStore

__all__ = ["Candidate", "IdentityStore"]
