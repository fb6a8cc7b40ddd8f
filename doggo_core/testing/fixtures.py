"""
doggo_core.testing.fixtures
---------------------------
The fixture contract every backend's conformance run must supply: three
identities (both halves, secret only, public only), a clear text and at least
two known ciphertexts of it for the identity holding both halves.

MOCK_FIXTURES is the static set the mock adapter understands. Backends whose
test key material cannot be shipped as static text build theirs with
generate_fixtures().
"""

from __future__ import annotations
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

CAR_KEYS = "Sry I can't remember where I buried ur car keys I'm just a pup"
TEST_PASSWORD = "test"


@dataclass(frozen=True)
class KeyFixture:
    fingerprint: str
    identifier: str
    password: Optional[str] = None
    # For a secret-only identity, ``pub`` is the material the backend is
    # expected to derive; it is never handed to import_key by the suite.
    pub: Optional[str] = None
    sec: Optional[str] = None
    cipher_texts: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FixtureSet:
    pub_sec: KeyFixture
    sec_only: KeyFixture
    pub_only: KeyFixture
    clear_text: str = CAR_KEYS
    # Matches the identifiers of more than one fixture identity
    shared_search: str = "doggo test"

    @property
    def keys(self) -> Tuple[KeyFixture, KeyFixture, KeyFixture]:
        return (self.pub_sec, self.sec_only, self.pub_only)


def mock_material(kind: str, fingerprint: str, identifier: str) -> str:
    return (
        f"-----BEGIN MOCK {kind} KEY-----\n"
        f"Identifier: {identifier}\n"
        f"\n"
        f"{fingerprint}\n"
        f"-----END MOCK {kind} KEY-----\n"
    )


def mock_message(fingerprint: str, body: str) -> str:
    return (
        "-----BEGIN MOCK MESSAGE-----\n"
        f"Recipient: {fingerprint}\n"
        "\n"
        f"{body}\n"
        "-----END MOCK MESSAGE-----\n"
    )


def _mock_fixture(fingerprint: str, identifier: str, password: Optional[str], pub: bool, sec: bool,
                  variants: int = 0) -> KeyFixture:
    return KeyFixture(
        fingerprint=fingerprint,
        identifier=identifier,
        password=password,
        pub=mock_material("PUBLIC", fingerprint, identifier) if pub else None,
        sec=mock_material("SECRET", fingerprint, identifier) if sec else None,
        cipher_texts=tuple(mock_message(fingerprint, f"car-keys-{n}") for n in range(1, variants + 1)),
    )


MOCK_FIXTURES = FixtureSet(
    pub_sec=_mock_fixture(
        "8EE6530544AD9745D5A32C485E27573F6126A601",
        "doggo test pubSec 09723339678055607",
        TEST_PASSWORD, pub=True, sec=True, variants=2,
    ),
    sec_only=_mock_fixture(
        "C621F4FD6113F55B1AFC0ED13844975650F7B6FC",
        "doggo test sec only 07654950429608411",
        TEST_PASSWORD, pub=True, sec=True,
    ),
    pub_only=_mock_fixture(
        "ED13DABE5CFDBCF66C50C42490C974227C71F5E0",
        "doggo test pub only 064285959780167",
        None, pub=True, sec=False,
    ),
)


def _suffix() -> str:
    return str(secrets.randbelow(10 ** 17)).zfill(17)


def generate_fixtures(doggo: Any, password: str = TEST_PASSWORD, clear_text: str = CAR_KEYS) -> FixtureSet:
    """
    Build a FixtureSet from a live backend: generate three identities, export
    their material, encrypt ``clear_text`` twice for the first one, then
    delete everything again so the keystore is left as it was found.

    ``doggo`` is a doggo_core.Doggo facade.
    """
    def _make(label: str):
        info = doggo.gen_keys(identifier=f"doggo test {label} {_suffix()}", password=password)
        exported = doggo.export_keys(fingerprint=info.fingerprint, type="all")
        return info, exported

    pub_sec_info, pub_sec = _make("pubSec")
    sec_only_info, sec_only = _make("sec only")
    pub_only_info, pub_only = _make("pub only")

    cipher_texts = tuple(
        doggo.encrypt(target=pub_sec_info.fingerprint, clear_text=clear_text) for _ in range(2)
    )

    for info in (pub_sec_info, sec_only_info, pub_only_info):
        doggo.delete_key(fingerprint=info.fingerprint, type="all", password=password)

    return FixtureSet(
        pub_sec=KeyFixture(
            fingerprint=pub_sec.fingerprint,
            identifier=pub_sec.identifier,
            password=password,
            pub=pub_sec.pub,
            sec=pub_sec.sec,
            cipher_texts=cipher_texts,
        ),
        sec_only=KeyFixture(
            fingerprint=sec_only.fingerprint,
            identifier=sec_only.identifier,
            password=password,
            pub=sec_only.pub,
            sec=sec_only.sec,
        ),
        pub_only=KeyFixture(
            fingerprint=pub_only.fingerprint,
            identifier=pub_only.identifier,
            pub=pub_only.pub,
        ),
        clear_text=clear_text,
    )
