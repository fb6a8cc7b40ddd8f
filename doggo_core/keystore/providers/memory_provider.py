from typing import Dict, List, Optional
from dataclasses import replace
from doggo_core.keystore.models import StoredKey
from doggo_core.keystore.provider import KeystoreProvider

class InMemoryKeystore(KeystoreProvider):
    name = "memory"

    def __init__(self):
        self.keys: Dict[str, StoredKey] = {}

    def upsert(self, rec: StoredKey):
        # dict assignment keeps the original insertion position
        self.keys[rec.fingerprint.upper()] = replace(rec, fingerprint=rec.fingerprint.upper())

    def get(self, fingerprint: str) -> Optional[StoredKey]:
        rec = self.keys.get(fingerprint.upper())
        return replace(rec) if rec else None

    def list(self) -> List[StoredKey]:
        return [replace(rec) for rec in self.keys.values()]

    def delete(self, fingerprint: str):
        self.keys.pop(fingerprint.upper(), None)
