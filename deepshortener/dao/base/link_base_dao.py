"""Abstract base class for link data access objects (DAOs).

This class establishes a consistent contract for all link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB).

Responsibilities:
    - Provide an interface for inserting, retrieving and deleting LinkModel objects.
    - Standardize error handling across multiple data store implementations.
    - Enforce a consistent API for LinkStore, which layers cache-aside logic on top.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from deepshortener.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)
        >>> dao.insert(link, ttl_seconds=3600)

        >>> dao.get_by_short_id("V1StGXR8").long_url
        'https://rydeu.com/en/booking/123'

        >>> dao.get_by_long_url("https://rydeu.com/en/booking/123").short_id
        'V1StGXR8'
"""

from abc import ABC, abstractmethod

from deepshortener.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        insert(link: LinkModel, ttl_seconds: int, **kwargs) -> LinkBaseDAO:
            Store a link so it can be found by short id and by long URL.
            Raises DataStoreError on connection or write failure.

        get_by_short_id(short_id: str, **kwargs) -> LinkModel | None:
            Retrieve a link by short id. Returns None if not found.
            Raises DataStoreError on connection or read failure.

        get_by_long_url(long_url: str, **kwargs) -> LinkModel | None:
            Retrieve a link by long URL. Returns None if not found.
            Raises DataStoreError on connection or read failure.

        delete(link: LinkModel, **kwargs) -> None:
            Remove every entry of a link. Deleting an absent link is a no-op.
            Raises DataStoreError on connection or write failure.

    NOTE:
        - DAOs return records as stored. Expiration policy is applied by LinkStore.
    """

    @abstractmethod
    def insert(self, link: LinkModel, ttl_seconds: int, **kwargs) -> 'LinkBaseDAO':
        """Store a link under all of its lookup keys.

        Args:
            link (LinkModel):
                The link to store.

            ttl_seconds (int):
                Lifetime applied to every stored entry of the link.

        Returns:
            LinkBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_short_id(self, short_id: str, **kwargs) -> LinkModel | None:
        """Retrieve a link by its short id, or None if absent."""
        pass

    @abstractmethod
    def get_by_long_url(self, long_url: str, **kwargs) -> LinkModel | None:
        """Retrieve a link by its long URL, or None if absent."""
        pass

    @abstractmethod
    def delete(self, link: LinkModel, **kwargs) -> None:
        """Remove every entry of a link. Absent entries are ignored."""
        pass
