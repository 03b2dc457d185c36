"""Redis store backend.

Only GET, SET and DEL are used, so any Redis-compatible server works.
"""

import redis

from restrooms.store.base import KeyValueStore, StorageError


class RedisStore(KeyValueStore):
    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str, timeout: float = 5.0) -> "RedisStore":
        client = redis.Redis.from_url(
            url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )
        return cls(client)

    def get(self, key: str) -> bytes | None:
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            raise StorageError("get", key, str(exc)) from exc

    def set(self, key: str, value: bytes) -> None:
        try:
            self.client.set(key, value)
        except redis.RedisError as exc:
            raise StorageError("set", key, str(exc)) from exc

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as exc:
            raise StorageError("delete", key, str(exc)) from exc
