# doggo_core/adapters/__init__.py
from __future__ import annotations
import os

from doggo_core.adapter import KeyAdapter
from doggo_core.keystore import load_keystore
from .mock import MockAdapter
from .native import NativeAdapter


def load_adapter(config: dict | None = None) -> KeyAdapter:
    """
    Factory resolver for selecting the backend behind the Doggo facade.

    For now:
        - native (default), backed by load_keystore(config)
        - mock
    """
    config = config or {}
    adapter = config.get("adapter") or os.getenv("DOGGO_ADAPTER", "native")

    if adapter == "native":
        return NativeAdapter(load_keystore(config))

    if adapter == "mock":
        return MockAdapter()

    raise ValueError(f"Unknown adapter: {adapter}")


__all__ = ["MockAdapter", "NativeAdapter", "load_adapter"]
