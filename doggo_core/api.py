"""
doggo_core.api
--------------
The Doggo facade: the single entry point consumers use.

Wraps one validated adapter, injects a default gen_password when the adapter
has none, validates every request against doggo_core.schema and delegates.
Whatever the adapter raises propagates unchanged.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from . import __version__
from .adapter import validate_adapter
from .errors import InvalidKeyError, KeyNotFoundError, RequestShapeError, TooManyKeysError
from .logger import get_logger
from .models import ExportedKeys, KeyInfo, KeyRecord
from .schema import (
    DecryptRequest,
    DeleteKeyRequest,
    EncryptRequest,
    ExportKeysRequest,
    GenKeysRequest,
    GenPasswordRequest,
    ImportKeyRequest,
    ListKeysRequest,
    parse_request,
)
from .utils import gen_password

log = get_logger("Doggo.Api")


def _default_gen_password(request: GenPasswordRequest) -> str:
    return gen_password(request.length)


class Doggo:
    """
    Usage:
        doggo = Doggo(NativeAdapter(SQLiteKeystore("db/keys.db")))
        info = doggo.import_key(key=armored, type="sec", password="...")
        cipher = doggo.encrypt(target=info.fingerprint, clear_text="hi")

    Every operation takes either a request object / mapping, keyword fields,
    or both.
    """

    InvalidKeyError = InvalidKeyError
    TooManyKeysError = TooManyKeysError
    KeyNotFoundError = KeyNotFoundError
    RequestShapeError = RequestShapeError

    version = __version__

    def __init__(self, adapter: Any = None):
        self.adapter = validate_adapter(adapter)
        self.name: str = adapter.name

        custom = getattr(adapter, "gen_password", None)
        if callable(custom):
            self._gen_password = custom
        else:
            log.debug(f"[API] adapter={self.name} has no gen_password, using default")
            self._gen_password = _default_gen_password

        log.info(f"[API] ready adapter={self.name}")

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "Doggo":
        from .adapters import load_adapter

        return cls(load_adapter(config))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def gen_keys(self, request: Any = None, **fields: Any) -> KeyInfo:
        req = parse_request(GenKeysRequest, request, **fields)
        log.info(f"[API] gen_keys adapter={self.name}")
        return self.adapter.gen_keys(req)

    def import_key(self, request: Any = None, **fields: Any) -> KeyInfo:
        req = parse_request(ImportKeyRequest, request, **fields)
        log.info(f"[API] import_key adapter={self.name} type={req.type}")
        return self.adapter.import_key(req)

    def list_keys(self, request: Any = None, **fields: Any) -> List[KeyRecord]:
        req = parse_request(ListKeysRequest, request, **fields)
        log.debug(f"[API] list_keys adapter={self.name} type={req.type}")
        return self.adapter.list_keys(req)

    def export_keys(self, request: Any = None, **fields: Any) -> ExportedKeys:
        req = parse_request(ExportKeysRequest, request, **fields)
        log.info(f"[API] export_keys adapter={self.name} fpr={req.fingerprint} type={req.type}")
        return self.adapter.export_keys(req)

    def delete_key(self, request: Any = None, **fields: Any) -> bool:
        req = parse_request(DeleteKeyRequest, request, **fields)
        log.info(f"[API] delete_key adapter={self.name} fpr={req.fingerprint} type={req.type}")
        return self.adapter.delete_key(req)

    def encrypt(self, request: Any = None, **fields: Any) -> str:
        req = parse_request(EncryptRequest, request, **fields)
        log.debug(f"[API] encrypt adapter={self.name} target={req.target}")
        return self.adapter.encrypt(req)

    def decrypt(self, request: Any = None, **fields: Any) -> str:
        req = parse_request(DecryptRequest, request, **fields)
        log.debug(f"[API] decrypt adapter={self.name}")
        return self.adapter.decrypt(req)

    def gen_password(self, request: Any = None, **fields: Any) -> str:
        req = parse_request(GenPasswordRequest, request, **fields)
        return self._gen_password(req)


def get_doggo(adapter: Any) -> Doggo:
    return Doggo(adapter)
