"""
Storage layer for the relay.

Only the identity cache lives here; nothing is persisted across restarts.
"""

from relay.repos.identity_cache import IdentityCache, identity_cache

__all__ = [
    "IdentityCache",
    "identity_cache",
]
