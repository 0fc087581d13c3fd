"""
Credential Store

Keeps the current Spotify access/refresh token pair. The authorization and
refresh code writes through ``CredentialStore.upsert``; anything calling the
Spotify API reads through ``CredentialStore.get_current`` and checks
``is_expired`` before use.
"""

from dev.lm04.stats.credentials.errors import (
    CredentialStoreError,
    NotFound,
    StorageError,
    ValidationError,
)
from dev.lm04.stats.credentials.store import (
    CredentialRecord,
    CredentialStore,
    is_expired,
    open_store,
)

__all__ = [
    "CredentialRecord",
    "CredentialStore",
    "CredentialStoreError",
    "NotFound",
    "StorageError",
    "ValidationError",
    "is_expired",
    "open_store",
]
