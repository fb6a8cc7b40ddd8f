# doggo_core/keystore/__init__.py
from __future__ import annotations

from .models import StoredKey
from .provider import KeystoreProvider
from .providers.memory_provider import InMemoryKeystore
from .providers.sqlite_provider import SQLiteKeystore
import os


def load_keystore(config: dict | None = None) -> KeystoreProvider:
    """
    Factory resolver for selecting the native backend's keystore.

    For now:
        - sqlite (default)
        - memory
    """
    config = config or {}
    provider = config.get("keystore") or os.getenv("DOGGO_KEYSTORE", "sqlite")

    if provider == "memory":
        return InMemoryKeystore()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("DOGGO_KEYSTORE_PATH", "db/doggo_keys.db")
        return SQLiteKeystore(db_path)

    raise ValueError(f"Unknown keystore provider: {provider}")


__all__ = [
    "StoredKey",
    "KeystoreProvider",
    "InMemoryKeystore",
    "SQLiteKeystore",
    "load_keystore",
]
