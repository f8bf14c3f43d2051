"""Cache-aside link store

LinkStore layers the link lifecycle on top of the Redis DAO (primary cache)
and an optional durable DAO (fallback):

    create()            validate -> reuse active link for the long URL, or
                        generate a short id and write both cache keys
    find_by_short_id()  cache -> durable fallback -> lazy expiration
    find_by_long_url()  same, keyed by long URL
    delete_by_short_id()
    purge()             unconditional removal used by the expiration sweeper

Failure semantics:
    - Cache read errors are logged and treated as a miss.
    - Cache write errors on create are fatal (StoreError).
    - Durable writes happen after both cache keys are set; their failures are
      logged only, the cache being the source of truth.
    - Lazy deletion never raises.

Concurrency:
    Two concurrent create() calls for the same long URL can both miss and both
    write. The last writer wins on the link:<long url> key and the other short
    id stays valid until it expires. This race is accepted: creation volume is
    low and a duplicate short id is harmless.

Example:
    >>> with LinkStore.from_config(load_config('create_link'), prefix=app_prefix()) as store:
    ...     link = store.create('https://rydeu.com/en/booking/123', 'customer')
    ...     store.create('https://rydeu.com/en/booking/123', 'customer').short_id == link.short_id
    True
"""

import logging
from collections.abc import Callable
from datetime import datetime, UTC
from typing import Any
from urllib.parse import urlparse

from deepshortener.constants import ShortId
from deepshortener.exceptions import StoreError, ValidationError
from deepshortener.models import LinkModel, LinkPolicy, UserType
from deepshortener.dao.base import LinkBaseDAO
from deepshortener.dao.redis import LinkRedisDAO
from deepshortener.dao.dynamodb import LinkDynamoDBDAO
from deepshortener.dao.exceptions import CorruptLinkRecordError, DataStoreError
from deepshortener.types import LambdaConfiguration
from deepshortener.utils.deeplinks import derive_deep_links
from deepshortener.utils.helpers import parse_instant
from deepshortener.utils.shortener import generate_short_id
from deepshortener.utils.ttl import compute_expiration, expiration_for, is_expired, remaining_seconds, seconds_until_expiration


logger = logging.getLogger(__name__)


class LinkStore:
    """Cache-aside store for links keyed by short id and by long URL.

    Attributes:
        cache (LinkRedisDAO):
            Primary store; both keys of every link live here.
        durable (LinkBaseDAO | None):
            Optional fallback consulted on cache misses.
        policy (LinkPolicy):
            TTL policy shared by every write and expiration check.
    """

    def __init__(
        self,
        cache: LinkRedisDAO,
        policy: LinkPolicy | None = None,
        durable: LinkBaseDAO | None = None,
        id_generator: Callable[[], str] = generate_short_id,
    ):
        self.cache = cache
        self.policy = policy or LinkPolicy()
        self.durable = durable
        self.id_generator = id_generator

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration, prefix: str | None = None) -> 'LinkStore':
        """Build a store from a Lambda configuration returned by load_config()."""
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        cache = LinkRedisDAO(**redis_config, prefix=prefix)
        durable = LinkDynamoDBDAO(**app_config['dynamodb']) if app_config.get('dynamodb') else None
        policy = LinkPolicy.from_config(app_config.get('policy'))
        return cls(cache=cache, policy=policy, durable=durable)

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> 'LinkStore':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # -------------------------------
    # Create
    # -------------------------------

    def create(self, long_url: Any, user_type: Any = None, booking_start_time: Any = None) -> LinkModel:
        """Return the active link for a long URL, creating it if needed

        Steps:
            1. Validate the long URL, user type and booking start time.
            2. Reject links whose expiration is already behind us.
            3. Reuse the active link for this long URL (idempotent create).
            4. Generate a short id, derive deep links and write both cache keys.

        Args:
            long_url (str):
                Absolute URL to shorten.
            user_type (str | UserType | None):
                'customer', 'supplier', 'organization' or empty.
            booking_start_time (str | datetime | None):
                ISO-8601 instant; selects the booking TTL branch when present.

        Returns:
            LinkModel: the existing or newly created link.

        Raises:
            ValidationError:
                On malformed input or a non-positive TTL. Nothing is written.
            StoreError:
                If the durable lookup fails or either cache key cannot be written.
        """
        long_url = self._validate_long_url(long_url)
        user_type = UserType.parse(user_type)

        now = datetime.now(UTC)
        booking_time = None
        if booking_start_time not in (None, ''):
            booking_time = parse_instant(booking_start_time)
            if booking_time < now:
                raise ValidationError(f'Cannot create link - booking start time ({booking_time.isoformat()}) is in the past.')

        try:
            expiration = expiration_for(now, booking_time, self.policy)
        except OverflowError as e:
            raise ValidationError('Cannot create link - expiration time out of range.') from e
        if remaining_seconds(expiration, now) <= 0:
            raise ValidationError('Cannot create link - expiration time would be in the past.')

        existing = self.find_by_long_url(long_url)
        if existing is not None:
            logger.info('Existing link found for long URL.', extra={'shortId': existing.short_id, 'longURL': long_url})
            return existing

        deep_link, ios_link = derive_deep_links(long_url, user_type)
        link = LinkModel(
            short_id=self._new_short_id(),
            long_url=long_url,
            user_type=user_type,
            created_at=now,
            booking_start_time=booking_time,
            deep_link=deep_link,
            ios_link=ios_link,
        )
        ttl_seconds = seconds_until_expiration(compute_expiration(link, self.policy), self.policy, now)

        # Both keys or nothing: a failure here must not report a link as created
        self.cache.insert(link, ttl_seconds)

        if self.durable is not None:
            try:
                self.durable.insert(link, ttl_seconds)
            except StoreError:
                logger.exception('Failed to persist link to durable store.', extra={'shortId': link.short_id})

        logger.info(
            'Created new link.',
            extra={'shortId': link.short_id, 'longURL': long_url, 'userType': user_type.value, 'ttlSeconds': ttl_seconds},
        )
        return link

    # -------------------------------
    # Read
    # -------------------------------

    def find_by_short_id(self, short_id: str) -> LinkModel | None:
        """Return the active link for a short id, or None

        Raises:
            StoreError: if the durable fallback fails after a cache miss.
        """
        return self._find(short_id, self.cache.get_by_short_id, self.durable.get_by_short_id if self.durable else None)

    def find_by_long_url(self, long_url: str) -> LinkModel | None:
        """Return the active link for a long URL, or None

        Raises:
            StoreError: if the durable fallback fails after a cache miss.
        """
        return self._find(long_url, self.cache.get_by_long_url, self.durable.get_by_long_url if self.durable else None)

    def _find(self, lookup: str, cache_get: Callable, durable_get: Callable | None) -> LinkModel | None:
        link = self._read_cache(cache_get, lookup)
        from_durable = False

        if link is None and durable_get is not None:
            try:
                link = durable_get(lookup)
            except CorruptLinkRecordError:
                logger.warning('Corrupt link record in durable store. Treating as absent.', extra={'lookup': lookup})
                link = None
            from_durable = link is not None

        if link is None:
            return None

        if is_expired(link, self.policy):
            logger.info('Link expired. Deleting both keys.', extra={'shortId': link.short_id})
            self._expire(link)
            return None

        if from_durable:
            self._warm_up(link)
        return link

    def _read_cache(self, cache_get: Callable, lookup: str) -> LinkModel | None:
        try:
            return cache_get(lookup)
        except DataStoreError:
            logger.warning('Cache read failed. Treating as cache miss.', exc_info=True, extra={'lookup': lookup})
        except CorruptLinkRecordError:
            logger.warning('Corrupt link record in cache. Treating as cache miss.', exc_info=True, extra={'lookup': lookup})
        return None

    def _warm_up(self, link: LinkModel) -> None:
        ttl_seconds = seconds_until_expiration(compute_expiration(link, self.policy), self.policy)
        try:
            self.cache.insert(link, ttl_seconds)
        except DataStoreError:
            logger.warning('Failed to warm up cache from durable store.', exc_info=True, extra={'shortId': link.short_id})

    # -------------------------------
    # Delete
    # -------------------------------

    def delete_by_short_id(self, short_id: str) -> LinkModel | None:
        """Delete both keys of a link (and its durable row), returning what was deleted

        The lookup ignores expiration so expired leftovers can be removed too.

        Raises:
            StoreError: if the lookup after a cache miss or the deletion fails.
        """
        link = self._read_cache(self.cache.get_by_short_id, short_id)
        if link is None and self.durable is not None:
            link = self.durable.get_by_short_id(short_id)
        if link is None:
            return None

        self.purge(link)
        logger.info('Deleted link.', extra={'shortId': short_id})
        return link

    def purge(self, link: LinkModel) -> None:
        """Remove both cache keys and the durable row of a link

        Raises:
            StoreError: if any backend fails. Absent keys are not an error.
        """
        self.cache.delete(link)
        if self.durable is not None:
            self.durable.delete(link)

    def _expire(self, link: LinkModel) -> None:
        try:
            self.purge(link)
        except StoreError:
            logger.warning('Failed to delete expired link. Leaving it to the sweeper.', exc_info=True, extra={'shortId': link.short_id})

    # -------------------------------
    # Helpers
    # -------------------------------

    def _new_short_id(self) -> str:
        for attempt in range(1, ShortId.MAX_ATTEMPTS + 1):
            short_id = self.id_generator()
            try:
                taken = self.cache.exists(short_id)
            except DataStoreError:
                # The following write reports a broken cache; a collision is negligible.
                logger.warning('Collision check failed. Using short id unchecked.', exc_info=True, extra={'shortId': short_id})
                return short_id
            if not taken:
                return short_id
            logger.warning('Short id collision.', extra={'shortId': short_id, 'attempt': attempt})

        raise DataStoreError(f'Failed to generate a unique short id after {ShortId.MAX_ATTEMPTS} attempts.')

    @staticmethod
    def _validate_long_url(long_url: Any) -> str:
        if not isinstance(long_url, str) or not long_url.strip():
            raise ValidationError('URL is required and must be a non-empty string.')

        long_url = long_url.strip()
        components = urlparse(long_url)
        if not components.scheme or not components.netloc:
            raise ValidationError(f'Invalid URL format: {long_url!r}.')
        return long_url
