import functools
import redis
from typing import Any
from collections.abc import Callable

from deepshortener.dao.exceptions import DataStoreError


__all__ = []


def redis_endpoint(client: redis.Redis) -> str:
    """Describe a client's endpoint as <host>:<port>/<db> for error messages"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_error[F: Callable[..., Any]](method: F) -> F:
    """Turn redis.exceptions.RedisError raised by a DAO method into DataStoreError

    Connection failures read "Can't connect to Redis at ..."; any other
    backend failure names the DAO method. Both mention the endpoint only,
    the backend's own message stays on __cause__ for the logs.

    Example:
        >>> @handle_redis_error
        ... def get_link(self, key):
        ...     return self.redis.get(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_endpoint(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis operation {method.__name__}() failed at {redis_endpoint(self.redis)}.') from e

    return wrapper
