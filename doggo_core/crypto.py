from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
import os, re, textwrap
from .utils import b64e, b64d, sha256

# --------- X25519 identities ----------
def x25519_generate() -> Tuple[bytes, bytes]:
    sk = x25519.X25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()
"""
doggo_core.crypto
-----------------
Primitives behind the native backend:

- X25519 identities, fingerprinted by truncated SHA-256 of the public key
- passphrase-protected PKCS#8 for secret halves
- X25519 + HKDF + AES-GCM sealed messages (ephemeral sender key per message)
- ASCII armor for every piece of key material and ciphertext

Nothing here knows about keystores or the adapter contract.
"""

PUBLIC_KEY_LABEL = "DOGGO PUBLIC KEY"
SECRET_KEY_LABEL = "DOGGO SECRET KEY"
MESSAGE_LABEL = "DOGGO MESSAGE"

X25519_KEY_SIZE = 32
NONCE_SIZE = 12


def compute_fingerprint(pub_raw: bytes) -> str:
    """
    40 upper-case hex characters of SHA-256 over the raw public key.

    Matches the fixed fingerprint length of the key contract.
    """
    return sha256(pub_raw)[:40].upper()

def derive_key(priv_raw: bytes, peer_pub: bytes, salt: Optional[bytes] = None, info: bytes = b"doggo-v1") -> bytes:
    sk = x25519.X25519PrivateKey.from_private_bytes(priv_raw)
    shared = sk.exchange(x25519.X25519PublicKey.from_public_bytes(peer_pub))
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=salt, info=info)
    return hkdf.derive(shared)  # 256-bit AEAD key

def aead_encrypt(key: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    aes = AESGCM(key)
    nonce = os.urandom(NONCE_SIZE)
    ct = aes.encrypt(nonce, plaintext, aad)
    return nonce, ct

def aead_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None) -> bytes:
    aes = AESGCM(key)
    return aes.decrypt(nonce, ciphertext, aad)

# --------- secret key protection ----------
def lock_secret(priv_raw: bytes, password: str) -> bytes:
    sk = x25519.X25519PrivateKey.from_private_bytes(priv_raw)
    return sk.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(password.encode("utf-8")),
    )

def unlock_secret(locked: bytes, password: Optional[str]) -> bytes:
    """
    Raises ValueError on a wrong password or malformed blob, TypeError when a
    password is missing (or given for an unprotected key).
    """
    pw = password.encode("utf-8") if password is not None else None
    sk = serialization.load_der_private_key(locked, password=pw)
    if not isinstance(sk, x25519.X25519PrivateKey):
        raise ValueError(f"expected an X25519 key, got {type(sk).__name__}")
    return sk.private_bytes_raw()

def check_locked_secret(locked: bytes) -> None:
    """
    Structural check for a locked secret without its password: a single DER
    SEQUENCE whose declared length covers exactly the whole blob.
    """
    if len(locked) < 2 or locked[0] != 0x30:
        raise ValueError("locked secret is not a DER SEQUENCE")
    length, offset = locked[1], 2
    if length & 0x80:
        n = length & 0x7F
        if not 1 <= n <= 4 or len(locked) < 2 + n:
            raise ValueError("locked secret has a malformed DER length")
        length, offset = int.from_bytes(locked[2:2 + n], "big"), 2 + n
    if offset + length != len(locked):
        raise ValueError("locked secret length does not match its DER header")

def public_from_secret(priv_raw: bytes) -> bytes:
    return x25519.X25519PrivateKey.from_private_bytes(priv_raw).public_key().public_bytes_raw()

# --------- sealed messages ----------
def seal(recipient_pub: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> bytes:
    """epk || nonce || ciphertext+tag, with a fresh ephemeral key per call."""
    eph_priv, eph_pub = x25519_generate()
    key = derive_key(eph_priv, recipient_pub)
    nonce, ct = aead_encrypt(key, plaintext, aad=aad)
    return eph_pub + nonce + ct

def unseal(recipient_priv: bytes, sealed: bytes, aad: Optional[bytes] = None) -> bytes:
    if len(sealed) <= X25519_KEY_SIZE + NONCE_SIZE:
        raise ValueError("sealed message is truncated")
    eph_pub = sealed[:X25519_KEY_SIZE]
    nonce = sealed[X25519_KEY_SIZE:X25519_KEY_SIZE + NONCE_SIZE]
    key = derive_key(recipient_priv, eph_pub)
    return aead_decrypt(key, nonce, sealed[X25519_KEY_SIZE + NONCE_SIZE:], aad=aad)

# --------- ASCII armor ----------
_BLOCK_RE = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\r?\n(?P<inner>.*?)\r?\n-----END (?P=label)-----",
    re.S,
)

@dataclass
class ArmoredBlock:
    label: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

def armor(label: str, body: bytes, headers: Optional[Dict[str, str]] = None) -> str:
    lines = [f"-----BEGIN {label}-----"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    lines.append("")
    lines.extend(textwrap.wrap(b64e(body), 64))
    lines.append(f"-----END {label}-----")
    return "\n".join(lines) + "\n"

def dearmor(text: str) -> List[ArmoredBlock]:
    """
    Parse every armored block in ``text``.

    Raises ValueError when there is no block, when text outside the blocks is
    not whitespace, or when a block is malformed.
    """
    blocks = []
    pos = 0
    for m in _BLOCK_RE.finditer(text):
        if text[pos:m.start()].strip():
            raise ValueError("unexpected text outside armored blocks")
        pos = m.end()

        head, sep, body = m.group("inner").replace("\r\n", "\n").partition("\n\n")
        if not sep:
            # No header section: the whole block is body
            head, body = "", head
        headers = {}
        for line in head.splitlines():
            if not line.strip():
                continue
            name, colon, value = line.partition(":")
            if not colon:
                raise ValueError(f"malformed armor header {line!r}")
            headers[name.strip()] = value.strip()
        blocks.append(ArmoredBlock(m.group("label"), b64d("".join(body.split())), headers))

    if text[pos:].strip():
        raise ValueError("unexpected text outside armored blocks")
    if not blocks:
        raise ValueError("no armored block found")
    return blocks
