"""
doggo_core
----------
Backend-agnostic key management: a Doggo facade over pluggable adapters,
the request/response contract they share, and a conformance suite that
proves an adapter honors it.
"""

__version__ = "0.1.0"

from .errors import (
    BackendError,
    DoggoError,
    InvalidAdapterError,
    InvalidKeyError,
    KeyNotFoundError,
    RequestShapeError,
    ResponseShapeError,
    TooManyKeysError,
)
from .models import ExportedKeys, KeyInfo, KeyRecord
from .adapter import KeyAdapter
from .api import Doggo, get_doggo

__all__ = [
    "__version__",
    "Doggo",
    "get_doggo",
    "KeyAdapter",
    "KeyInfo",
    "KeyRecord",
    "ExportedKeys",
    "DoggoError",
    "BackendError",
    "InvalidAdapterError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "RequestShapeError",
    "ResponseShapeError",
    "TooManyKeysError",
]
