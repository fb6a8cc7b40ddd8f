# doggo_core/adapters/mock.py
"""
In-memory reference backend.

Knows only the identities of its FixtureSet (plus any it generates) and
recognizes them by their exact material, so it passes the conformance suite
without doing real cryptography. Use it to check the suite itself, and as a
template when writing a new backend.
"""

from __future__ import annotations
import itertools
import secrets
from typing import Dict, List, Set, Tuple

from doggo_core.adapter import KeyAdapter, filter_records, format_identifier, select_target
from doggo_core.errors import BackendError, InvalidKeyError, KeyNotFoundError
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
from doggo_core.testing.fixtures import MOCK_FIXTURES, FixtureSet, KeyFixture, mock_material, mock_message

log = get_logger("Doggo.Adapter.Mock")


class MockAdapter(KeyAdapter):
    name = "mock"

    def __init__(self, fixtures: FixtureSet = MOCK_FIXTURES):
        self.fixtures = fixtures
        self.identities: Dict[str, KeyFixture] = {f.fingerprint: f for f in fixtures.keys}
        # fingerprint -> imported halves, in import order
        self.imported: Dict[str, Set[str]] = {}
        self._pool_cursor: Dict[str, int] = {}
        self._messages: Dict[str, Tuple[str, str]] = {}
        self._counter = itertools.count(1)

    def gen_keys(self, request: GenKeysRequest) -> KeyInfo:
        fpr = secrets.token_hex(20).upper()
        identifier = format_identifier(request.identifier, request.comment, request.email)
        self.identities[fpr] = KeyFixture(
            fingerprint=fpr,
            identifier=identifier,
            password=request.password,
            pub=mock_material("PUBLIC", fpr, identifier),
            sec=mock_material("SECRET", fpr, identifier),
        )
        self.imported[fpr] = {"pub", "sec"}
        log.info(f"[MOCK] generated fpr={fpr}")
        return KeyInfo(fingerprint=fpr, identifier=identifier)

    def import_key(self, request: ImportKeyRequest) -> KeyInfo:
        ident, halves = self._match(request.key)

        if request.type == "pub" and halves != {"pub"}:
            raise InvalidKeyError("expected public key material only")
        if request.type == "sec" and halves != {"sec"}:
            raise InvalidKeyError("expected secret key material only")
        if request.type == "sec" and request.password != ident.password:
            raise InvalidKeyError(f"secret key for {ident.fingerprint} could not be unlocked")

        if "sec" in halves:
            # The public half is always derivable from the secret half
            halves = halves | {"pub"}
        self.imported.setdefault(ident.fingerprint, set()).update(halves)
        log.info(f"[MOCK] imported fpr={ident.fingerprint} type={request.type}")
        return KeyInfo(fingerprint=ident.fingerprint, identifier=ident.identifier)

    def list_keys(self, request: ListKeysRequest) -> List[KeyRecord]:
        return filter_records(
            self._records(),
            search=request.search,
            fingerprint=request.fingerprint,
            type=request.type,
        )

    def export_keys(self, request: ExportKeysRequest) -> ExportedKeys:
        fpr = request.fingerprint.upper()
        halves = self.imported.get(fpr)
        if not halves:
            raise KeyNotFoundError(request.fingerprint)
        ident = self.identities[fpr]
        return ExportedKeys(
            fingerprint=fpr,
            identifier=ident.identifier,
            pub=ident.pub if "pub" in halves and wants_public(request.type) else None,
            sec=ident.sec if "sec" in halves and wants_secret(request.type) else None,
        )

    def delete_key(self, request: DeleteKeyRequest) -> bool:
        fpr = request.fingerprint.upper()
        halves = self.imported.get(fpr)
        if not halves:
            return True

        if request.type == "pub" and "sec" in halves:
            raise BackendError(f"{fpr} still holds a secret key; delete the secret key first")
        if request.type in ("sec", "all") and "sec" in halves:
            self._check_password(self.identities[fpr], request.password)

        if request.type == "sec":
            halves.discard("sec")
        else:
            halves.clear()
        if not halves:
            del self.imported[fpr]
        return True

    def encrypt(self, request: EncryptRequest) -> str:
        target = select_target(self._records(), request.target)
        ident = self.identities[target.fingerprint]

        if request.clear_text == self.fixtures.clear_text and ident.cipher_texts:
            # Fake non-determinism by cycling through known ciphertexts
            cursor = self._pool_cursor.get(ident.fingerprint, 0)
            self._pool_cursor[ident.fingerprint] = cursor + 1
            return ident.cipher_texts[cursor % len(ident.cipher_texts)]

        cipher_text = mock_message(ident.fingerprint, f"synthetic-{next(self._counter)}")
        self._messages[cipher_text] = (ident.fingerprint, request.clear_text)
        return cipher_text

    def decrypt(self, request: DecryptRequest) -> str:
        owner, clear_text = self._resolve_message(request.cipher_text)
        if "sec" not in self.imported.get(owner, set()):
            raise BackendError(f"no secret key available for recipient {owner}")
        self._check_password(self.identities[owner], request.password)
        return clear_text

    # ------------------------------------------------------------------
    def _records(self) -> List[KeyRecord]:
        return [
            KeyRecord(
                fingerprint=fpr,
                identifier=self.identities[fpr].identifier,
                has_public="pub" in halves,
                has_secret="sec" in halves,
            )
            for fpr, halves in self.imported.items()
        ]

    def _match(self, key: str) -> Tuple[KeyFixture, Set[str]]:
        for ident in self.identities.values():
            if ident.pub is not None and key == ident.pub:
                return ident, {"pub"}
            if ident.sec is not None and key == ident.sec:
                return ident, {"sec"}
            if ident.pub is not None and ident.sec is not None and key == ident.pub + ident.sec:
                return ident, {"pub", "sec"}
        raise InvalidKeyError("key material does not match any known key")

    def _resolve_message(self, cipher_text: str) -> Tuple[str, str]:
        if cipher_text in self._messages:
            return self._messages[cipher_text]
        for ident in self.identities.values():
            if cipher_text in ident.cipher_texts:
                return ident.fingerprint, self.fixtures.clear_text
        raise BackendError("message was not produced for any known key")

    @staticmethod
    def _check_password(ident: KeyFixture, password) -> None:
        if ident.password is not None and password != ident.password:
            raise BackendError(f"could not unlock secret key {ident.fingerprint}")
