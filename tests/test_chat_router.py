"""Tests for the chat router: persistence of both sides of each exchange."""

import threading
import time

import pytest

from organizeit.clock import ms_from_iso
from organizeit.errors import MalformedInput
from organizeit.intelligence.chat import ChatIntentRouter
from organizeit.store import MemoryKVStore


@pytest.fixture
def router(store, clock):
    return ChatIntentRouter(store, clock=clock)


class TestHandle:
    def test_save_money_round_trip(self, router, store):
        result = router.handle("How can I save money?", user_id="u1")
        assert result["intent"] == "cost"
        assert len(result["suggestions"]) == 4

        records = [value for _key, value in store.list("chat:u1:")]
        assert len(records) == 2
        user, bot = records
        assert user["type"] == "user"
        assert user["message"] == "How can I save money?"
        assert bot["type"] == "bot"
        assert bot["message"] == result["response"]
        assert bot["suggestions"] == result["suggestions"]
        assert ms_from_iso(bot["timestamp"]) > ms_from_iso(user["timestamp"])
        assert result["timestamp"] == bot["timestamp"]

    def test_frozen_clock_still_gives_distinct_keys(self, router, store):
        router.handle("hello", user_id="u1")
        router.handle("any alerts?", user_id="u1")
        keys = [k for k, _ in store.list("chat:u1:")]
        assert len(keys) == 4
        assert len(set(keys)) == 4

    def test_defaults(self, router, store):
        router.handle("hello")
        records = [value for _key, value in store.list("chat:anonymous:")]
        assert len(records) == 2
        assert records[0]["context"] == "general"

    def test_context_is_recorded(self, router, store):
        router.handle("hello", context="finops", user_id="u2")
        assert all(v["context"] == "finops" for _k, v in store.list("chat:u2:"))

    @pytest.mark.parametrize("message", ["", "   ", None, 42])
    def test_invalid_message_writes_nothing(self, router, store, message):
        with pytest.raises(MalformedInput):
            router.handle(message, user_id="u1")
        assert store.list("chat:") == []

    def test_user_id_with_colon_rejected(self, router, store):
        with pytest.raises(MalformedInput):
            router.handle("hello", user_id="a:b")
        assert store.list("chat:") == []

    def test_long_message_truncated(self, store, clock):
        router = ChatIntentRouter(store, max_message_length=10, clock=clock)
        router.handle("x" * 50, user_id="u1")
        user = store.list("chat:u1:")[0][1]
        assert user["message"] == "x" * 10


class TestHistory:
    def test_oldest_first(self, router, clock):
        router.handle("hello", user_id="u1")
        clock.advance(5)
        router.handle("carbon", user_id="u1")
        history = router.history("u1")
        assert [r["type"] for r in history] == ["user", "bot", "user", "bot"]
        assert history[2]["message"] == "carbon"

    def test_limit_keeps_latest(self, router, clock):
        router.handle("hello", user_id="u1")
        clock.advance(1)
        router.handle("carbon", user_id="u1")
        history = router.history("u1", limit=2)
        assert [r["type"] for r in history] == ["user", "bot"]
        assert history[0]["message"] == "carbon"

    def test_users_are_isolated(self, router):
        router.handle("hello", user_id="u1")
        router.handle("hello", user_id="u10")
        assert len(router.history("u1")) == 2

    def test_unknown_user(self, router):
        assert router.history("nobody") == []


class _SlowStore(MemoryKVStore):
    """Widens the gap between checking a key and writing it."""

    def get(self, key):
        time.sleep(0.05)
        return super().get(key)


def test_concurrent_messages_from_one_user_keep_every_record(clock):
    store = _SlowStore()
    router = ChatIntentRouter(store, clock=clock)
    threads = [
        threading.Thread(target=router.handle, args=(f"hello {n}",), kwargs={"user_id": "u"})
        for n in range(2)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = [value for _key, value in store.list("chat:u:")]
    assert len(records) == 4
    assert sorted(r["type"] for r in records) == ["bot", "bot", "user", "user"]
    assert {r["message"] for r in records if r["type"] == "user"} == {"hello 0", "hello 1"}
