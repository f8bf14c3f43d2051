"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when the cache or durable store fails (connection issues, timeouts, OOM, etc.).

    CorruptLinkRecordError:
        Raised when a stored link record cannot be deserialized.

Example:
    >>> from deepshortener.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    deepshortener.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from deepshortener.exceptions import DeepShortenerError, StoreError


class DAOError(DeepShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'DAO_ERROR'


class DataStoreError(DAOError, StoreError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'STORE_ERROR'


class CorruptLinkRecordError(DAOError):
    """Raised when a stored link record cannot be deserialized."""

    error_code = 'CORRUPT_LINK_RECORD'
