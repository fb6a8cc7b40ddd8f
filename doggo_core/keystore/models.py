# doggo_core/keystore/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from doggo_core.models import KeyInfo, KeyRecord
from doggo_core.utils import now_ts


@dataclass
class StoredKey:
    """
    Keystore-level representation of one identity.

    Holds the armored halves exactly as the backend will export them. This is
    intentionally storage-agnostic and can be used by any provider
    (SQLite, memory, ...).
    """
    fingerprint: str
    identifier: str
    pub: Optional[str] = None
    sec: Optional[str] = None   # still passphrase-protected
    updated_at: str = field(default_factory=now_ts)

    @property
    def has_public(self) -> bool:
        return self.pub is not None

    @property
    def has_secret(self) -> bool:
        return self.sec is not None

    def to_record(self) -> KeyRecord:
        return KeyRecord(
            fingerprint=self.fingerprint,
            identifier=self.identifier,
            has_public=self.has_public,
            has_secret=self.has_secret,
        )

    def to_info(self) -> KeyInfo:
        return KeyInfo(fingerprint=self.fingerprint, identifier=self.identifier)
