from __future__ import annotations
from typing import Optional, List
import sqlite3, os
from doggo_core.keystore.models import StoredKey
from doggo_core.keystore.provider import KeystoreProvider
from doggo_core.logger import get_logger

log = get_logger("Doggo.Keystore.SQLite")

_COLUMNS = "fingerprint,identifier,pub,sec,updated_at"


class SQLiteKeystore(KeystoreProvider):
    name = "sqlite"

    def __init__(self, path="db/doggo_keys.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.path = path
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        c = self.db.cursor()
        c.execute("""CREATE TABLE IF NOT EXISTS keyring(
            fingerprint TEXT PRIMARY KEY,
            identifier TEXT NOT NULL,
            pub TEXT,
            sec TEXT,
            updated_at TEXT NOT NULL
        )""")
        self.db.commit()
        log.debug(f"[SQLITE] keystore ready path={self.path}")

    def upsert(self, rec: StoredKey) -> None:
        # ON CONFLICT ... DO UPDATE keeps the rowid, and with it the list order
        self.db.execute(
            f"INSERT INTO keyring({_COLUMNS}) VALUES(?,?,?,?,?) "
            "ON CONFLICT(fingerprint) DO UPDATE SET identifier=excluded.identifier, "
            "pub=excluded.pub, sec=excluded.sec, updated_at=excluded.updated_at",
            (rec.fingerprint.upper(), rec.identifier, rec.pub, rec.sec, rec.updated_at)
        )
        self.db.commit()

    def get(self, fingerprint: str) -> Optional[StoredKey]:
        cur = self.db.execute(f"SELECT {_COLUMNS} FROM keyring WHERE fingerprint=?", (fingerprint.upper(),))
        row = cur.fetchone()
        if not row: return None
        return StoredKey(*row)

    def list(self) -> List[StoredKey]:
        cur = self.db.execute(f"SELECT {_COLUMNS} FROM keyring ORDER BY rowid")
        return [StoredKey(*row) for row in cur.fetchall()]

    def delete(self, fingerprint: str) -> None:
        self.db.execute("DELETE FROM keyring WHERE fingerprint=?", (fingerprint.upper(),))
        self.db.commit()

    def close(self):
        self.db.close()
