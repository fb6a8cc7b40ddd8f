"""
doggo_core.schema
-----------------
Request/response contract for every adapter operation.

Each request is a dataclass with an explicit ``validate()`` step. Callers may
hand the facade an instance, a plain mapping, keyword fields, or a mix of
those; ``parse_request`` normalizes them and rejects anything the contract
does not allow before a backend ever sees it.

This module also serves as API documentation: keep it in sync with
``adapter.KeyAdapter``.
"""

from __future__ import annotations
import dataclasses
import re
from dataclasses import dataclass
from typing import Any, ClassVar, List, Mapping, Optional, Type, TypeVar

from .errors import RequestShapeError, ResponseShapeError
from .models import KEY_TYPES, FINGERPRINT_LENGTH, ExportedKeys, KeyInfo, KeyRecord
from .utils import DEFAULT_PASSWORD_LENGTH

MIN_PASSWORD_LENGTH = 12
MAX_PASSWORD_LENGTH = 1024

_EMAIL_RE = re.compile(r"^[^@\s<>]+@[^@\s<>]+\.[^@\s<>]+$")

R = TypeVar("R")


# --------- field checks ----------
def _string(op: str, name: str, value: Any, required: bool = True, single_line: bool = False) -> None:
    if value is None:
        if required:
            raise RequestShapeError(op, name, "is required")
        return
    if not isinstance(value, str):
        raise RequestShapeError(op, name, f"must be a string, got {type(value).__name__}")
    if value == "":
        raise RequestShapeError(op, name, "must not be empty")
    if single_line and ("\n" in value or "\r" in value):
        raise RequestShapeError(op, name, "must not contain line breaks")


def _key_type(op: str, name: str, value: Any) -> None:
    if value not in KEY_TYPES:
        raise RequestShapeError(op, name, f"must be one of {', '.join(KEY_TYPES)}, got {value!r}")


def _fingerprint(op: str, name: str, value: Any, required: bool = True) -> None:
    _string(op, name, value, required=required)
    if value is not None and len(value) != FINGERPRINT_LENGTH:
        raise RequestShapeError(op, name, f"must be exactly {FINGERPRINT_LENGTH} characters")


# --------- requests ----------
@dataclass
class GenKeysRequest:
    identifier: str
    password: str
    comment: Optional[str] = None
    email: Optional[str] = None

    operation: ClassVar[str] = "gen_keys"

    def validate(self) -> None:
        op = self.operation
        _string(op, "identifier", self.identifier, single_line=True)
        _string(op, "password", self.password)
        _string(op, "comment", self.comment, required=False, single_line=True)
        _string(op, "email", self.email, required=False, single_line=True)
        if self.email is not None and not _EMAIL_RE.match(self.email):
            raise RequestShapeError(op, "email", "must be a valid email address")


@dataclass
class ImportKeyRequest:
    key: str
    type: str
    password: Optional[str] = None

    operation: ClassVar[str] = "import_key"

    def validate(self) -> None:
        op = self.operation
        _string(op, "key", self.key)
        _key_type(op, "type", self.type)
        if self.type == "sec":
            _string(op, "password", self.password)
        elif self.password is not None:
            raise RequestShapeError(op, "password", "is only allowed when type is 'sec'")


@dataclass
class ListKeysRequest:
    search: Optional[str] = None
    fingerprint: Optional[str] = None
    type: str = "all"

    operation: ClassVar[str] = "list_keys"

    def validate(self) -> None:
        op = self.operation
        if self.search is not None and self.fingerprint is not None:
            raise RequestShapeError(op, "search", "is mutually exclusive with 'fingerprint'")
        _string(op, "search", self.search, required=False)
        _fingerprint(op, "fingerprint", self.fingerprint, required=False)
        _key_type(op, "type", self.type)


@dataclass
class ExportKeysRequest:
    fingerprint: str
    type: str

    operation: ClassVar[str] = "export_keys"

    def validate(self) -> None:
        _fingerprint(self.operation, "fingerprint", self.fingerprint)
        _key_type(self.operation, "type", self.type)


@dataclass
class DeleteKeyRequest:
    fingerprint: str
    type: str
    password: Optional[str] = None

    operation: ClassVar[str] = "delete_key"

    def validate(self) -> None:
        op = self.operation
        _fingerprint(op, "fingerprint", self.fingerprint)
        _key_type(op, "type", self.type)
        # Secret material only goes away with the passphrase that protects it
        _string(op, "password", self.password, required=self.type in ("sec", "all"))


@dataclass
class EncryptRequest:
    target: str
    clear_text: str

    operation: ClassVar[str] = "encrypt"

    def validate(self) -> None:
        _string(self.operation, "target", self.target)
        _string(self.operation, "clear_text", self.clear_text)


@dataclass
class DecryptRequest:
    cipher_text: str
    password: Optional[str] = None

    operation: ClassVar[str] = "decrypt"

    def validate(self) -> None:
        _string(self.operation, "cipher_text", self.cipher_text)
        _string(self.operation, "password", self.password, required=False)


@dataclass
class GenPasswordRequest:
    length: int = DEFAULT_PASSWORD_LENGTH

    operation: ClassVar[str] = "gen_password"

    def validate(self) -> None:
        # bool is an int subclass; True is not a length
        if not isinstance(self.length, int) or isinstance(self.length, bool):
            raise RequestShapeError(self.operation, "length", "must be an integer")
        if not MIN_PASSWORD_LENGTH <= self.length <= MAX_PASSWORD_LENGTH:
            raise RequestShapeError(
                self.operation, "length",
                f"must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH}",
            )


def parse_request(request_cls: Type[R], request: Any = None, **fields: Any) -> R:
    """
    Build and validate a request of type ``request_cls``.

    ``request`` may be None, an instance of ``request_cls`` or a mapping;
    keyword ``fields`` override it. Unknown fields and missing required
    fields raise RequestShapeError.
    """
    op = request_cls.operation
    data = {}
    if request is None:
        pass
    elif isinstance(request, request_cls):
        data.update(dataclasses.asdict(request))
    elif isinstance(request, Mapping):
        data.update(request)
    else:
        raise RequestShapeError(op, None, f"expected a mapping or {request_cls.__name__}, got {type(request).__name__}")
    data.update(fields)

    declared = dataclasses.fields(request_cls)
    known = {f.name for f in declared}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise RequestShapeError(op, unknown[0], "is not allowed")

    for f in declared:
        has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        if not has_default and f.name not in data:
            raise RequestShapeError(op, f.name, "is required")

    req = request_cls(**data)
    req.validate()
    return req


# --------- responses ----------
def _check_identity(op: str, obj: Any) -> None:
    fpr = getattr(obj, "fingerprint", None)
    if not isinstance(fpr, str) or len(fpr) != FINGERPRINT_LENGTH:
        raise ResponseShapeError(op, f"fingerprint must be a {FINGERPRINT_LENGTH}-character string, got {fpr!r}")
    ident = getattr(obj, "identifier", None)
    if not isinstance(ident, str) or not ident:
        raise ResponseShapeError(op, f"identifier must be a non-empty string, got {ident!r}")


def validate_key_info(value: Any, op: str = "import_key") -> KeyInfo:
    if not isinstance(value, KeyInfo):
        raise ResponseShapeError(op, f"expected KeyInfo, got {type(value).__name__}")
    _check_identity(op, value)
    return value


def validate_key_records(value: Any, op: str = "list_keys") -> List[KeyRecord]:
    if not isinstance(value, list):
        raise ResponseShapeError(op, f"expected a list, got {type(value).__name__}")
    seen = set()
    for rec in value:
        if not isinstance(rec, KeyRecord):
            raise ResponseShapeError(op, f"expected KeyRecord items, got {type(rec).__name__}")
        _check_identity(op, rec)
        if not isinstance(rec.has_public, bool) or not isinstance(rec.has_secret, bool):
            raise ResponseShapeError(op, "has_public/has_secret must be booleans")
        if rec.has_secret and not rec.has_public:
            raise ResponseShapeError(op, f"{rec.fingerprint} has a secret half but no public half")
        if not (rec.has_public or rec.has_secret):
            raise ResponseShapeError(op, f"{rec.fingerprint} is listed without any key material")
        if rec.fingerprint.upper() in seen:
            raise ResponseShapeError(op, f"{rec.fingerprint} is listed twice")
        seen.add(rec.fingerprint.upper())
    return value


def validate_exported_keys(value: Any, op: str = "export_keys") -> ExportedKeys:
    if not isinstance(value, ExportedKeys):
        raise ResponseShapeError(op, f"expected ExportedKeys, got {type(value).__name__}")
    _check_identity(op, value)
    for half in ("pub", "sec"):
        material = getattr(value, half)
        if material is None:
            continue
        if not isinstance(material, str) or material == "":
            raise ResponseShapeError(op, f"{half} must be a non-empty string or None")
    return value


def validate_text(value: Any, op: str) -> str:
    if not isinstance(value, str):
        raise ResponseShapeError(op, f"expected a string, got {type(value).__name__}")
    return value


def validate_delete_result(value: Any, op: str = "delete_key") -> bool:
    if value is not True:
        raise ResponseShapeError(op, f"expected True, got {value!r}")
    return value
