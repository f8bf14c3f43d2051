"""Connection handling shared by the Redis-backed link cache

RedisClientMixin owns the client's lifecycle: it builds a client from the
`redis` section of the app config (or adopts one handed in by a test or
by the sweeper), pings it once and closes the pool when the DAO is used
as a context manager.

    >>> with LinkRedisDAO(redis_host='redis.internal', prefix='deepshortener:prod') as cache:
    ...     cache.get_by_short_id('V1StGXR8')
"""

from typing import Optional

import redis

from deepshortener.dao.redis.redis_key_schema import RedisKeySchema
from deepshortener.dao.redis.helpers import redis_endpoint
from deepshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Give a DAO a ready `self.redis` client and a `self.keys` schema

    Keyword arguments mirror the `redis` config section with a `redis_`
    prefix, so `LinkRedisDAO(**{f'redis_{k}': v for k, v in section.items()})`
    works as is. Unreachable Redis fails fast with DataStoreError.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 2.0,
        redis_ssl: Optional[bool] = False,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        # ElastiCache in-transit encryption needs ssl=True; the same timeout bounds connect and reads
        self.redis = redis_client or redis.Redis(
            host=redis_host,
            port=int(redis_port),
            db=int(redis_db),
            decode_responses=redis_decode_responses,
            username=redis_username,
            password=redis_password,
            socket_timeout=redis_socket_timeout,
            socket_connect_timeout=redis_socket_timeout,
            ssl=bool(redis_ssl),
        )
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; report False or raise DataStoreError when it does not answer"""
        try:
            self.redis.ping()
        except redis.exceptions.RedisError as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_endpoint(self.redis)}. Check the 'redis' section of the app config."
            ) from e
        return True

    def close(self) -> None:
        self.redis.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
