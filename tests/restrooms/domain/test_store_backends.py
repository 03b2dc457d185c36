"""Tests for the key-value store backends and store selection."""

from unittest.mock import MagicMock

import pytest
import redis
from restrooms.store.base import StorageError
from restrooms.store.keys import KeyLayout
from restrooms.store.memory import MemoryStore
from restrooms.store.redis_store import RedisStore
from restrooms.store.registry import build_store, get_store, use_store


class TestMemoryStore:
    def test_get_missing_is_none(self):
        assert MemoryStore().get("nope") is None

    def test_set_then_get(self):
        store = MemoryStore()
        store.set("k", b"v")
        assert store.get("k") == b"v"

    def test_set_overwrites(self):
        store = MemoryStore()
        store.set("k", b"v1")
        store.set("k", b"v2")
        assert store.get("k") == b"v2"

    def test_delete(self):
        store = MemoryStore()
        store.set("k", b"v")
        store.delete("k")
        assert store.get("k") is None

    def test_delete_missing_is_not_an_error(self):
        MemoryStore().delete("nope")

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            MemoryStore().set("k", "text")

    def test_initial_contents(self):
        store = MemoryStore({"a": b"1"})
        assert store.get("a") == b"1"
        assert len(store) == 1


class TestRedisStore:
    def test_round_trip_through_client(self):
        client = MagicMock()
        client.get.return_value = b"payload"
        store = RedisStore(client)

        store.set("k", b"payload")
        assert store.get("k") == b"payload"
        store.delete("k")

        client.set.assert_called_once_with("k", b"payload")
        client.get.assert_called_once_with("k")
        client.delete.assert_called_once_with("k")

    @pytest.mark.parametrize("operation, args", [("get", ("k",)), ("set", ("k", b"v")), ("delete", ("k",))])
    def test_redis_errors_become_storage_errors(self, operation, args):
        client = MagicMock()
        getattr(client, operation).side_effect = redis.ConnectionError("connection refused")
        store = RedisStore(client)

        with pytest.raises(StorageError) as exc:
            getattr(store, operation)(*args)

        assert exc.value.operation == operation
        assert exc.value.key == "k"
        assert "connection refused" in str(exc.value)

    def test_from_url_builds_client(self):
        store = RedisStore.from_url("redis://localhost:6379/0", timeout=1.5)
        assert isinstance(store.client, redis.Redis)


class TestBuildStore:
    def test_memory_url(self):
        assert isinstance(build_store("memory://"), MemoryStore)

    def test_empty_url_defaults_to_memory(self):
        assert isinstance(build_store(""), MemoryStore)

    def test_redis_url(self):
        assert isinstance(build_store("redis://localhost:6379/0"), RedisStore)

    def test_unknown_scheme_rejected(self):
        with pytest.raises(ValueError):
            build_store("postgres://localhost/db")


class TestCurrentStore:
    def test_use_store_replaces_current(self):
        replacement = MemoryStore()
        use_store(replacement)
        assert get_store() is replacement


class TestKeyLayout:
    def test_default_layout(self):
        keys = KeyLayout()
        assert keys.location("abc") == "bathroom:location:abc"
        assert keys.review("r1") == "bathroom:review:r1"
        assert keys.location_index() == "bathroom:locations:list"
        assert keys.vote("u1", "r1") == "bathroom:vote:u1:r1"

    def test_custom_prefix(self):
        assert KeyLayout("staging").review("r1") == "staging:review:r1"
