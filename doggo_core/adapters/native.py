# doggo_core/adapters/native.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from cryptography.exceptions import InvalidTag

from doggo_core import crypto
from doggo_core.adapter import KeyAdapter, filter_records, format_identifier, select_target
from doggo_core.errors import BackendError, InvalidKeyError, KeyNotFoundError
from doggo_core.keystore import InMemoryKeystore, KeystoreProvider, StoredKey
from doggo_core.logger import get_logger
from doggo_core.models import ExportedKeys, KeyInfo, KeyRecord, wants_public, wants_secret
from doggo_core.schema import (
    DecryptRequest,
    DeleteKeyRequest,
    EncryptRequest,
    ExportKeysRequest,
    GenKeysRequest,
    ImportKeyRequest,
    ListKeysRequest,
)
from doggo_core.utils import b64d, b64e, now_ts

log = get_logger("Doggo.Adapter.Native")


@dataclass
class _ParsedKey:
    fingerprint: str
    identifier: str
    pub_raw: bytes
    locked_sec: Optional[bytes] = None


def armor_public(identifier: str, pub_raw: bytes) -> str:
    return crypto.armor(crypto.PUBLIC_KEY_LABEL, pub_raw, {"Identifier": identifier})


def armor_secret(identifier: str, pub_raw: bytes, locked: bytes) -> str:
    return crypto.armor(
        crypto.SECRET_KEY_LABEL,
        locked,
        {"Identifier": identifier, "Public": b64e(pub_raw)},
    )


class NativeAdapter(KeyAdapter):
    """
    Backend built on the ``cryptography`` package and a keystore provider.

    Identities are X25519 key pairs. Secret halves stay passphrase-protected
    at rest and are only unlocked in memory for decrypt, import verification
    and delete authorization.
    """

    name = "native"

    def __init__(self, keystore: Optional[KeystoreProvider] = None):
        self.keystore = keystore if keystore is not None else InMemoryKeystore()

    # ------------------------------------------------------------------
    # Key lifecycle
    # ------------------------------------------------------------------
    def gen_keys(self, request: GenKeysRequest) -> KeyInfo:
        identifier = format_identifier(request.identifier, request.comment, request.email)
        priv_raw, pub_raw = crypto.x25519_generate()
        fpr = crypto.compute_fingerprint(pub_raw)

        self.keystore.upsert(StoredKey(
            fingerprint=fpr,
            identifier=identifier,
            pub=armor_public(identifier, pub_raw),
            sec=armor_secret(identifier, pub_raw, crypto.lock_secret(priv_raw, request.password)),
        ))
        log.info(f"[NATIVE] generated fpr={fpr}")
        return KeyInfo(fingerprint=fpr, identifier=identifier)

    def import_key(self, request: ImportKeyRequest) -> KeyInfo:
        parsed = self._parse_material(request.key)

        labels = {label for label, _ in parsed}
        if request.type == "pub" and labels != {crypto.PUBLIC_KEY_LABEL}:
            raise InvalidKeyError("expected public key material only")
        if request.type == "sec" and labels != {crypto.SECRET_KEY_LABEL}:
            raise InvalidKeyError("expected secret key material only")

        fingerprints = {key.fingerprint for _, key in parsed}
        if len(fingerprints) != 1:
            raise InvalidKeyError(f"key material spans {len(fingerprints)} identities")

        identifier = parsed[0][1].identifier
        pub_raw = parsed[0][1].pub_raw
        locked = None
        unlocked = False
        for label, key in parsed:
            if label != crypto.SECRET_KEY_LABEL:
                continue
            if request.password is not None:
                self._verify_secret(key, request.password)
                unlocked = True
            locked = key.locked_sec

        fpr = fingerprints.pop()
        existing = self.keystore.get(fpr)
        sec = armor_secret(identifier, pub_raw, locked) if locked is not None else None
        if existing is not None and existing.has_secret and (sec is None or not unlocked):
            # A secret that was never unlocked does not replace one on file
            sec = existing.sec

        self.keystore.upsert(StoredKey(
            fingerprint=fpr,
            identifier=identifier,
            pub=armor_public(identifier, pub_raw),
            sec=sec,
            updated_at=now_ts(),
        ))
        log.info(f"[NATIVE] imported fpr={fpr} type={request.type}")
        return KeyInfo(fingerprint=fpr, identifier=identifier)

    def list_keys(self, request: ListKeysRequest) -> List[KeyRecord]:
        return filter_records(
            (rec.to_record() for rec in self.keystore.list()),
            search=request.search,
            fingerprint=request.fingerprint,
            type=request.type,
        )

    def export_keys(self, request: ExportKeysRequest) -> ExportedKeys:
        stored = self.keystore.get(request.fingerprint)
        if stored is None:
            raise KeyNotFoundError(request.fingerprint)
        return ExportedKeys(
            fingerprint=stored.fingerprint,
            identifier=stored.identifier,
            pub=stored.pub if wants_public(request.type) else None,
            sec=stored.sec if wants_secret(request.type) else None,
        )

    def delete_key(self, request: DeleteKeyRequest) -> bool:
        stored = self.keystore.get(request.fingerprint)
        if stored is None:
            return True

        if request.type == "pub":
            if stored.has_secret:
                raise BackendError(
                    f"{stored.fingerprint} still holds a secret key; delete the secret key first"
                )
            self.keystore.delete(stored.fingerprint)
        elif stored.has_secret:
            # Deleting secret material requires proving the passphrase
            self._unlock(stored, request.password)
            if request.type == "sec":
                stored.sec = None
                stored.updated_at = now_ts()
                self.keystore.upsert(stored)
            else:
                self.keystore.delete(stored.fingerprint)
        elif request.type == "all":
            self.keystore.delete(stored.fingerprint)

        log.info(f"[NATIVE] deleted fpr={stored.fingerprint} type={request.type}")
        return True

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------
    def encrypt(self, request: EncryptRequest) -> str:
        target = select_target((rec.to_record() for rec in self.keystore.list()), request.target)
        stored = self.keystore.get(target.fingerprint)
        pub_raw = self._parse_material(stored.pub)[0][1].pub_raw

        sealed = crypto.seal(pub_raw, request.clear_text.encode("utf-8"), aad=stored.fingerprint.encode("ascii"))
        log.debug(f"[NATIVE] encrypted for fpr={stored.fingerprint}")
        return crypto.armor(crypto.MESSAGE_LABEL, sealed, {"Recipient": stored.fingerprint})

    def decrypt(self, request: DecryptRequest) -> str:
        try:
            blocks = crypto.dearmor(request.cipher_text)
        except ValueError as e:
            raise BackendError(f"malformed message: {e}", cause=e) from e
        if len(blocks) != 1 or blocks[0].label != crypto.MESSAGE_LABEL:
            raise BackendError(f"expected a single {crypto.MESSAGE_LABEL} block")

        recipient = blocks[0].headers.get("Recipient", "")
        stored = self.keystore.get(recipient) if recipient else None
        if stored is None or not stored.has_secret:
            raise BackendError(f"no secret key available for recipient {recipient or '?'}")

        priv_raw = self._unlock(stored, request.password)
        try:
            clear = crypto.unseal(priv_raw, blocks[0].body, aad=stored.fingerprint.encode("ascii"))
        except (InvalidTag, ValueError) as e:
            raise BackendError("message failed authentication", cause=e) from e
        log.debug(f"[NATIVE] decrypted for fpr={stored.fingerprint}")
        return clear.decode("utf-8")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _parse_material(self, text: str) -> List[tuple]:
        """Armored key text -> [(label, _ParsedKey)], or InvalidKeyError."""
        try:
            blocks = crypto.dearmor(text)
        except ValueError as e:
            raise InvalidKeyError(f"key material does not parse: {e}") from e

        parsed = []
        for block in blocks:
            identifier = block.headers.get("Identifier")
            if not identifier:
                raise InvalidKeyError(f"{block.label} block has no Identifier header")

            if block.label == crypto.PUBLIC_KEY_LABEL:
                pub_raw = block.body
                locked = None
            elif block.label == crypto.SECRET_KEY_LABEL:
                try:
                    pub_raw = b64d(block.headers.get("Public", ""))
                except ValueError as e:
                    raise InvalidKeyError("secret key has a malformed Public header") from e
                locked = block.body
                try:
                    crypto.check_locked_secret(locked)
                except ValueError as e:
                    raise InvalidKeyError(f"secret key block does not parse: {e}") from e
            else:
                raise InvalidKeyError(f"unexpected block {block.label}")

            if len(pub_raw) != crypto.X25519_KEY_SIZE:
                raise InvalidKeyError(f"public key must be {crypto.X25519_KEY_SIZE} bytes, got {len(pub_raw)}")
            parsed.append((
                block.label,
                _ParsedKey(crypto.compute_fingerprint(pub_raw), identifier, pub_raw, locked),
            ))
        return parsed

    def _verify_secret(self, key: _ParsedKey, password: str) -> None:
        try:
            priv_raw = crypto.unlock_secret(key.locked_sec, password)
        except (ValueError, TypeError) as e:
            raise InvalidKeyError(f"secret key for {key.fingerprint} could not be unlocked") from e
        if crypto.public_from_secret(priv_raw) != key.pub_raw:
            raise InvalidKeyError(f"secret key does not match its public key {key.fingerprint}")

    def _unlock(self, stored: StoredKey, password: Optional[str]) -> bytes:
        key = self._parse_material(stored.sec)[0][1]
        try:
            return crypto.unlock_secret(key.locked_sec, password)
        except (ValueError, TypeError) as e:
            raise BackendError(f"could not unlock secret key {stored.fingerprint}", cause=e) from e
