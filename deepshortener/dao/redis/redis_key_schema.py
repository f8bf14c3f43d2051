import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing links.

    Every link lives under two keys holding the same serialized record:
        shortId:{short_id}
        link:{long_url}

    An optional prefix can be provided to namespace all generated keys,
    e.g. "deepshortener:prod" or "deepshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def short_id_key(self, short_id: str) -> str:
        return f'shortId:{short_id}'

    @prefix_key
    def long_url_key(self, long_url: str) -> str:
        return f'link:{long_url}'

    @prefix_key
    def short_id_pattern(self) -> str:
        return 'shortId:*'
