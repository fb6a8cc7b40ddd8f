from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from .errors import InvalidAdapterError, KeyNotFoundError, TooManyKeysError
from .models import ExportedKeys, KeyInfo, KeyRecord
from .schema import (
    DecryptRequest,
    DeleteKeyRequest,
    EncryptRequest,
    ExportKeysRequest,
    GenKeysRequest,
    ImportKeyRequest,
    ListKeysRequest,
)

"""Key-management adapter contract.

Backends implement these operations and hand themselves to the Doggo facade.
Callers interact only with the facade, never with a backend's keyring,
process or files directly.

gen_password is optional; the facade injects a default when it is missing.
"""

REQUIRED_CAPABILITIES = (
    "gen_keys",
    "import_key",
    "list_keys",
    "export_keys",
    "encrypt",
    "decrypt",
    "delete_key",
)


class KeyAdapter(ABC):
    """
    Base class for cryptographic backends.

    Every operation receives an already validated request dataclass from
    doggo_core.schema. Subclassing is optional: any object that passes
    validate_adapter() is accepted by the facade.
    """
    name: str = "base"

    @abstractmethod
    def gen_keys(self, request: GenKeysRequest) -> KeyInfo:
        """Create a new identity holding both halves."""

    @abstractmethod
    def import_key(self, request: ImportKeyRequest) -> KeyInfo:
        """
        Import public and/or secret material.

        Must be idempotent, and must raise InvalidKeyError when the material
        does not parse for request.type.
        """

    @abstractmethod
    def list_keys(self, request: ListKeysRequest) -> List[KeyRecord]:
        """Records in keyring order, filtered as filter_records() does."""

    @abstractmethod
    def export_keys(self, request: ExportKeysRequest) -> ExportedKeys:
        """Halves that exist and were requested; None for the rest."""

    @abstractmethod
    def delete_key(self, request: DeleteKeyRequest) -> bool:
        """
        Returns True, including when nothing matched.

        Deleting "pub" while the secret half is still stored may raise
        instead (gpg refuses it, and so do the shipped backends with
        BackendError): delete "sec" or "all" first. Repeating a delete that
        succeeded always returns True.
        """

    @abstractmethod
    def encrypt(self, request: EncryptRequest) -> str:
        """Non-deterministic: the same input never yields the same output twice."""

    @abstractmethod
    def decrypt(self, request: DecryptRequest) -> str:
        ...


def validate_adapter(adapter: Any) -> Any:
    """Fail fast when ``adapter`` cannot serve every required operation."""
    if adapter is None:
        raise InvalidAdapterError("Invalid adapter passed: an adapter is required")

    name = getattr(adapter, "name", None)
    missing = [cap for cap in REQUIRED_CAPABILITIES if not callable(getattr(adapter, cap, None))]

    if not isinstance(name, str) or not name:
        raise InvalidAdapterError(
            f"Invalid adapter passed: 'name' must be a non-empty string, got {name!r}",
            missing=["name", *missing],
        )
    if missing:
        raise InvalidAdapterError(
            f"Invalid adapter passed: adapter {name!r} is missing {', '.join(missing)}",
            missing=missing,
        )
    return adapter


# --------- shared query helpers ----------
def matches_search(record: KeyRecord, search: str) -> bool:
    needle = search.lower()
    return needle in record.fingerprint.lower() or needle in record.identifier.lower()


def filter_records(
    records: Iterable[KeyRecord],
    search: Optional[str] = None,
    fingerprint: Optional[str] = None,
    type: str = "all",
) -> List[KeyRecord]:
    """
    Apply list_keys semantics to a backend's records.

    fingerprint is an exact (case-insensitive) match, search a fuzzy match on
    fingerprint or identifier. type "pub" keeps records with a public half,
    "sec" records with a secret half, "all" everything.
    """
    out = []
    for rec in records:
        if fingerprint is not None and rec.fingerprint.upper() != fingerprint.upper():
            continue
        if search is not None and not matches_search(rec, search):
            continue
        if type == "pub" and not rec.has_public:
            continue
        if type == "sec" and not rec.has_secret:
            continue
        if not (rec.has_public or rec.has_secret):
            continue
        out.append(rec)
    return out


def select_target(records: Iterable[KeyRecord], target: str) -> KeyRecord:
    """Resolve an encryption target to exactly one record with a public half."""
    matches = filter_records(records, search=target, type="pub")
    if not matches:
        raise KeyNotFoundError(target)
    if len(matches) > 1:
        raise TooManyKeysError(target, [rec.fingerprint for rec in matches])
    return matches[0]


def format_identifier(name: str, comment: Optional[str] = None, email: Optional[str] = None) -> str:
    """'name (comment) <email>', the familiar OpenPGP user id layout."""
    ident = name
    if comment:
        ident += f" ({comment})"
    if email:
        ident += f" <{email}>"
    return ident
