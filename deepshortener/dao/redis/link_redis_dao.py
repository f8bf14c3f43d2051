"""Data Access Object (DAO) implementation for links in Redis

This module provides a Redis-based implementation of LinkBaseDAO. Every link
is stored twice, as the same JSON record, under two keys with the same TTL:

    <prefix>:shortId:<short id>   -> link record (redirect lookups)
    <prefix>:link:<long url>      -> link record (idempotent create lookups)

Responsibilities:
    - Insert both keys of a link in a single MULTI/EXEC transaction;
    - Retrieve links by short id, by long URL or by raw key;
    - Delete both keys of a link, sparing a long URL key now owned by another link;
    - Enumerate short id keys for the expiration sweeper;
    - Convert Redis failures into DataStoreError.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> dao = LinkRedisDAO(prefix="deepshortener:dev")
    >>> dao.insert(link, ttl_seconds=3600)
    <LinkRedisDAO>
    >>> dao.get_by_short_id(link.short_id) == link
    True
    >>> dao.delete(link)
    >>> dao.get_by_long_url(link.long_url) is None
    True
"""

import json

from beartype import beartype

from deepshortener.models import LinkModel
from deepshortener.dao.base import LinkBaseDAO
from deepshortener.dao.redis.mixins import RedisClientMixin
from deepshortener.dao.redis.helpers import handle_redis_error
from deepshortener.dao.exceptions import CorruptLinkRecordError, DataStoreError


# KEYS[1] = short id key, KEYS[2] = long URL key, ARGV[1] = short id.
# Long URL records without a readable shortId are removed as well.
DELETE_LINK_SCRIPT = """
local removed = redis.call('DEL', KEYS[1])
local record = redis.call('GET', KEYS[2])
if record then
    local ok, decoded = pcall(cjson.decode, record)
    if not ok or type(decoded) ~= 'table' or decoded['shortId'] == nil or decoded['shortId'] == ARGV[1] then
        removed = removed + redis.call('DEL', KEYS[2])
    end
end
return removed
"""


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(link: LinkModel, ttl_seconds: int) -> LinkRedisDAO:
            Write both keys of a link with the same TTL.
        get_by_short_id(short_id: str) -> LinkModel | None
        get_by_long_url(long_url: str) -> LinkModel | None
        get_by_key(key: str) -> LinkModel | None
        exists(short_id: str) -> bool
        delete(link: LinkModel) -> None
        short_id_keys() -> list[str]

    Every method raises DataStoreError on Redis failures. Readers raise
    CorruptLinkRecordError when a stored record cannot be parsed.
    """

    @handle_redis_error
    @beartype
    def insert(self, link: LinkModel, ttl_seconds: int, **kwargs) -> 'LinkRedisDAO':
        """Write both keys of a link in one transaction

        Both SET commands are queued in a MULTI/EXEC pipeline so a reader never
        observes one key without the other, and both carry the same TTL.

        Args:
            link (LinkModel):
                Link to store.
            ttl_seconds (int):
                TTL applied to both keys. Must be positive.

        Returns:
            LinkRedisDAO: self (for method chaining)

        Raises:
            ValueError:
                If ttl_seconds is not positive.
            DataStoreError:
                If Redis fails or does not acknowledge both writes.
        """
        if ttl_seconds <= 0:
            raise ValueError(f'TTL must be a positive integer (given value: {ttl_seconds}).')

        payload = json.dumps(link.to_dict(), separators=(',', ':'), ensure_ascii=False)
        short_id_key = self.keys.short_id_key(link.short_id)
        long_url_key = self.keys.long_url_key(link.long_url)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(short_id_key, payload, ex=ttl_seconds)
            pipe.set(long_url_key, payload, ex=ttl_seconds)
            results = pipe.execute()

        if not all(results):
            raise DataStoreError(f"Redis did not acknowledge both keys of link '{link.short_id}'.")
        return self

    @handle_redis_error
    @beartype
    def get_by_short_id(self, short_id: str, **kwargs) -> LinkModel | None:
        return self._load(self.redis.get(self.keys.short_id_key(short_id)))

    @handle_redis_error
    @beartype
    def get_by_long_url(self, long_url: str, **kwargs) -> LinkModel | None:
        return self._load(self.redis.get(self.keys.long_url_key(long_url)))

    @handle_redis_error
    @beartype
    def get_by_key(self, key: str) -> LinkModel | None:
        """Retrieve a link by a fully qualified key, as returned by short_id_keys()."""
        return self._load(self.redis.get(key))

    @handle_redis_error
    @beartype
    def exists(self, short_id: str) -> bool:
        return bool(self.redis.exists(self.keys.short_id_key(short_id)))

    @handle_redis_error
    @beartype
    def delete(self, link: LinkModel, **kwargs) -> None:
        """Delete both keys of a link

        The short id key always goes. The long URL key goes only while it
        still belongs to this link: after a concurrent create for the same
        URL it may point at another, still active short id. Keys that are
        already gone are not an error.
        """
        self.redis.eval(
            DELETE_LINK_SCRIPT,
            2,
            self.keys.short_id_key(link.short_id),
            self.keys.long_url_key(link.long_url),
            link.short_id,
        )

    @handle_redis_error
    def short_id_keys(self) -> list[str]:
        """List every short id key using SCAN (non-blocking, unlike KEYS)."""
        return [key.decode() if isinstance(key, bytes) else key for key in self.redis.scan_iter(match=self.keys.short_id_pattern(), count=500)]

    @staticmethod
    def _load(blob: str | bytes | None) -> LinkModel | None:
        if blob is None:
            return None
        try:
            return LinkModel.from_dict(json.loads(blob))
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptLinkRecordError('Stored link record cannot be parsed.') from e
