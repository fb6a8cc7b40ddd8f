# doggo_core/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

KEY_TYPES = ("pub", "sec", "all")
FINGERPRINT_LENGTH = 40


@dataclass
class KeyInfo:
    """Identity reference returned by import_key and gen_keys."""
    fingerprint: str
    identifier: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class KeyRecord:
    """
    Presence view of one identity, as returned by list_keys.

    Never carries key material. has_secret implies has_public: a backend can
    always derive the public half from the secret half.
    """
    fingerprint: str
    identifier: str
    has_public: bool = False
    has_secret: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExportedKeys:
    fingerprint: str
    identifier: str
    pub: Optional[str] = None   # None when absent or not requested, never ""
    sec: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def wants_public(key_type: str) -> bool:
    return key_type in ("pub", "all")


def wants_secret(key_type: str) -> bool:
    return key_type in ("sec", "all")
