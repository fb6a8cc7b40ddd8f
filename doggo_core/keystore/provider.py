# doggo_core/keystore/provider.py
from __future__ import annotations
from typing import List, Optional

from doggo_core.keystore.models import StoredKey


class KeystoreProvider:
    """
    Persistence contract for the native backend.

    Fingerprints are stored upper-case; lookups are case-insensitive.
    list() returns identities in first-insertion order: updating an identity
    keeps its position.
    """
    name: str = "base"

    def upsert(self, rec: StoredKey) -> None:
        raise NotImplementedError

    def get(self, fingerprint: str) -> Optional[StoredKey]:
        raise NotImplementedError

    def list(self) -> List[StoredKey]:
        raise NotImplementedError

    def delete(self, fingerprint: str) -> None:
        """Idempotent: deleting an unknown fingerprint is not an error."""
        raise NotImplementedError

    def close(self) -> None:
        return
