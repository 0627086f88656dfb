"""Key-value persistence backends."""

from organizeit.store.kv import KeyValueStore, MemoryKVStore, SQLiteKVStore, create_store

__all__ = ["KeyValueStore", "MemoryKVStore", "SQLiteKVStore", "create_store"]
