"""Tests for the key-value store backends.

Both backends must behave identically: JSON values in, JSON values out,
prefix scans in key order, and a StoreFailure for anything that cannot be
persisted.
"""

import pytest

from organizeit.errors import StoreFailure
from organizeit.store import MemoryKVStore, SQLiteKVStore, create_store


@pytest.fixture(params=["memory", "sqlite"])
def kv(request, tmp_path):
    if request.param == "memory":
        store = MemoryKVStore()
    else:
        store = SQLiteKVStore(str(tmp_path / "kv.db"))
    yield store
    store.close()


class TestBasicOperations:
    def test_missing_key_is_none(self, kv):
        assert kv.get("nope") is None

    def test_set_then_get(self, kv):
        kv.set("a", {"x": 1, "y": [1, 2, 3]})
        assert kv.get("a") == {"x": 1, "y": [1, 2, 3]}

    def test_overwrite(self, kv):
        kv.set("a", 1)
        kv.set("a", 2)
        assert kv.get("a") == 2

    def test_delete(self, kv):
        kv.set("a", 1)
        kv.delete("a")
        assert kv.get("a") is None

    def test_delete_missing_is_noop(self, kv):
        kv.delete("never-set")

    def test_non_serializable_raises(self, kv):
        with pytest.raises(StoreFailure):
            kv.set("bad", {"obj": object()})
        assert kv.get("bad") is None


class TestPrefixScan:
    def test_sorted_and_filtered(self, kv):
        kv.set("chat:u1:200", "b")
        kv.set("chat:u1:100", "a")
        kv.set("chat:u2:100", "other user")
        kv.set("metrics:x", 0)
        assert kv.list("chat:u1:") == [("chat:u1:100", "a"), ("chat:u1:200", "b")]

    def test_wildcard_characters_are_literal(self, kv):
        kv.set("a%b:1", 1)
        kv.set("a_b:1", 2)
        kv.set("axb:1", 3)
        assert kv.list("a_b:") == [("a_b:1", 2)]
        assert kv.list("a%b:") == [("a%b:1", 1)]

    def test_empty_result(self, kv):
        assert kv.list("nothing:") == []


def test_memory_store_returns_copies():
    kv = MemoryKVStore()
    value = {"items": [1]}
    kv.set("k", value)
    value["items"].append(2)
    fetched = kv.get("k")
    fetched["items"].append(3)
    assert kv.get("k") == {"items": [1]}


def test_sqlite_persists_across_instances(tmp_path):
    path = str(tmp_path / "durable.db")
    first = SQLiteKVStore(path)
    first.set("alerts:current", [{"id": "A"}])
    first.close()

    second = SQLiteKVStore(path)
    assert second.get("alerts:current") == [{"id": "A"}]
    second.close()


def test_sqlite_corrupt_row_raises(tmp_path):
    kv = SQLiteKVStore(str(tmp_path / "kv.db"))
    conn = kv._get_conn()
    conn.execute("INSERT INTO kv (key, value, updated_at) VALUES ('broken', '{not json', 0)")
    conn.commit()
    with pytest.raises(StoreFailure):
        kv.get("broken")
    kv.close()


class TestCreateStore:
    def test_memory(self):
        assert isinstance(create_store("memory"), MemoryKVStore)

    def test_sqlite(self, tmp_path):
        kv = create_store("SQLite", str(tmp_path / "x.db"))
        assert isinstance(kv, SQLiteKVStore)
        kv.close()

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("redis")
