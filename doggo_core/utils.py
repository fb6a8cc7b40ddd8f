"""
doggo_core.utils
----------------
Lightweight helpers for base64, timestamping, hashing and password
generation. Nothing here touches key material directly.
"""

from __future__ import annotations
import base64, time, hashlib, secrets, string

DEFAULT_PASSWORD_LENGTH = 32

# Printable, shell-friendly alphabet (no quotes, backslashes or whitespace)
PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!#$%&()*+,-./:;<=>?@[]^_{|}~"


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    # Strict: armored bodies must not smuggle non-alphabet characters
    return base64.b64decode(s.encode("ascii"), validate=True)

def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()

def gen_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    """High-entropy password drawn from the OS CSPRNG."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
