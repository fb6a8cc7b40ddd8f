import pytest

from doggo_core.keystore import InMemoryKeystore, SQLiteKeystore, StoredKey

FPR_A = "A" * 40
FPR_B = "B" * 40


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        s = InMemoryKeystore()
    else:
        s = SQLiteKeystore(str(tmp_path / "keys.db"))
    yield s
    s.close()


def test_upsert_get_roundtrip(store):
    store.upsert(StoredKey(fingerprint=FPR_A, identifier="pup", pub="PUB"))
    got = store.get(FPR_A)
    assert got and got.pub == "PUB" and got.sec is None
    assert got.has_public and not got.has_secret
    # lookups ignore case
    assert store.get(FPR_A.lower()).identifier == "pup"
    assert store.get(FPR_B) is None


def test_list_keeps_first_insertion_order(store):
    store.upsert(StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB"))
    store.upsert(StoredKey(fingerprint=FPR_B, identifier="b", pub="PUB"))
    store.upsert(StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB", sec="SEC"))

    listed = store.list()
    assert [k.fingerprint for k in listed] == [FPR_A, FPR_B]
    assert listed[0].sec == "SEC"


def test_delete_is_idempotent(store):
    store.upsert(StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB"))
    store.delete(FPR_A.lower())
    store.delete(FPR_A)
    assert store.get(FPR_A) is None
    assert store.list() == []


def test_returned_records_are_copies(store):
    store.upsert(StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB", sec="SEC"))
    got = store.get(FPR_A)
    got.sec = None
    assert store.get(FPR_A).sec == "SEC"


def test_stored_key_views():
    rec = StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB", sec="SEC")
    assert rec.to_record().has_secret and rec.to_record().has_public
    assert rec.to_info().identifier == "a"
    assert "T" in rec.updated_at


def test_sqlite_schema_exists(tmp_path):
    store = SQLiteKeystore(str(tmp_path / "keys.db"))
    cur = store.db.execute("PRAGMA table_info(keyring)")
    cols = [row[1] for row in cur.fetchall()]
    for col in ("fingerprint", "identifier", "pub", "sec", "updated_at"):
        assert col in cols


def test_sqlite_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "dir" / "keys.db"
    first = SQLiteKeystore(str(path))
    first.upsert(StoredKey(fingerprint=FPR_A, identifier="a", pub="PUB"))
    first.close()

    assert path.exists()
    second = SQLiteKeystore(str(path))
    assert second.get(FPR_A).pub == "PUB"
    second.close()
