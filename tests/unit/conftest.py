"""Shared fixtures: an in-memory Redis stand-in and ready-made link stores."""

import fnmatch
import json
from collections.abc import Iterator
from datetime import datetime, UTC
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest
import redis

from deepshortener.models import LinkModel, LinkPolicy, UserType
from deepshortener.dao.base import LinkBaseDAO
from deepshortener.dao.redis import LinkRedisDAO
from deepshortener.dao.link_store import LinkStore


class FakeRedis:
    """Dict-backed Redis client covering the commands LinkRedisDAO issues.

    Commands listed in `failing` raise redis.exceptions.ConnectionError, which
    lets tests simulate an unreachable cache for single operations.
    """

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.failing: set[str] = set()
        self.connection_pool = SimpleNamespace(connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0})

    def _check(self, command: str) -> None:
        if command in self.failing:
            raise redis.exceptions.ConnectionError(f'{command} failed')

    def ping(self) -> bool:
        self._check('ping')
        return True

    def get(self, key: str) -> str | None:
        self._check('get')
        return self.data.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check('set')
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def exists(self, *keys: str) -> int:
        self._check('exists')
        return sum(1 for key in keys if key in self.data)

    def delete(self, *keys: str) -> int:
        self._check('delete')
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def eval(self, script: str, numkeys: int, *keys_and_args: str) -> int:
        """Run the link delete script: drop the short id key, and the long URL key while it is still owned"""
        self._check('eval')
        (short_id_key, long_url_key), (short_id,) = keys_and_args[:numkeys], keys_and_args[numkeys:]
        removed = self.delete(short_id_key)
        record = self.data.get(long_url_key)
        if record is not None:
            try:
                decoded = json.loads(record)
            except ValueError:
                decoded = None
            owner = decoded.get('shortId') if isinstance(decoded, dict) else None
            if owner is None or owner == short_id:
                removed += self.delete(long_url_key)
        return removed

    def scan_iter(self, match: str | None = None, count: int | None = None) -> Iterator[str]:
        self._check('scan_iter')
        return iter([key for key in list(self.data) if match is None or fnmatch.fnmatchcase(key, match)])

    def pipeline(self, transaction: bool = True) -> 'FakePipeline':
        return FakePipeline(self)

    def close(self) -> None:
        pass


class FakePipeline:
    def __init__(self, client: FakeRedis):
        self.client = client
        self.commands: list[tuple[str, str, int | None]] = []

    def __enter__(self) -> 'FakePipeline':
        return self

    def __exit__(self, *exc_info) -> None:
        self.commands.clear()

    def set(self, key: str, value: str, ex: int | None = None) -> 'FakePipeline':
        self.commands.append((key, value, ex))
        return self

    def execute(self) -> list[Any]:
        # MULTI/EXEC: nothing is applied when the transaction fails
        self.client._check('execute')
        return [self.client.set(key, value, ex=ex) for key, value, ex in self.commands]


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(fake_redis: FakeRedis) -> LinkRedisDAO:
    return LinkRedisDAO(redis_client=fake_redis, prefix='deepshortener:test')


@pytest.fixture
def policy() -> LinkPolicy:
    return LinkPolicy()


@pytest.fixture
def link_store(cache: LinkRedisDAO, policy: LinkPolicy) -> LinkStore:
    return LinkStore(cache=cache, policy=policy)


@pytest.fixture
def durable() -> LinkBaseDAO:
    dao = MagicMock(spec=LinkBaseDAO)
    dao.get_by_short_id.return_value = None
    dao.get_by_long_url.return_value = None
    return dao


@pytest.fixture
def make_link():
    def factory(**overrides: Any) -> LinkModel:
        fields = {
            'short_id': 'V1StGXR8',
            'long_url': 'https://rydeu.com/en/booking/123',
            'user_type': UserType.CUSTOMER,
            'created_at': datetime(2025, 10, 1, tzinfo=UTC),
            'booking_start_time': None,
            'deep_link': 'rydeu://app/booking/123',
            'ios_link': 'rydeu://app/booking/123',
        }
        fields.update(overrides)
        return LinkModel(**fields)

    return factory
