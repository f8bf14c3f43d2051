"""Durable link store backed by Amazon DynamoDB

Optional fallback behind the Redis cache. Redis stays the source of truth;
this table keeps links available after a cache flush or failover.

Table layout:
    - partition key:   shortId (S)
    - GSI:             longURL-index, partition key longURL (S)
    - TTL attribute:   expiresAt (N, epoch seconds), same lifetime as the cache keys

Classes:
    LinkDynamoDBDAO:
        DAO for storing and retrieving LinkModel in a DynamoDB table.

Example:
    >>> dao = LinkDynamoDBDAO(table_name='deepshortener-links')
    >>> dao.insert(link, ttl_seconds=3600)
    <LinkDynamoDBDAO>
    >>> dao.get_by_long_url(link.long_url).short_id
    'V1StGXR8'
"""

import functools
import time
from collections.abc import Callable
from typing import Any, Optional

import boto3
from beartype import beartype
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from deepshortener.types import DynamoDBTable
from deepshortener.models import LinkModel
from deepshortener.dao.base import LinkBaseDAO
from deepshortener.dao.exceptions import CorruptLinkRecordError, DataStoreError


LONG_URL_INDEX = 'longURL-index'
TTL_ATTRIBUTE = 'expiresAt'


def handle_dynamodb_error(method: Callable) -> Callable:
    """Wrap DynamoDB-interacting DAO methods to convert AWS errors into DataStoreError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (BotoCoreError, ClientError) as e:
            raise DataStoreError(f'DynamoDB operation {method.__name__}() failed on table {self.table_name}.') from e

    return wrapper


class LinkDynamoDBDAO(LinkBaseDAO):
    """DynamoDB-based Data Access Object (DAO) for links

    Attributes:
        table (DynamoDBTable):
            boto3 Table resource.
        table_name (str):
            Name of the DynamoDB table.
    """

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        table: Optional[DynamoDBTable] = None,
    ):
        if not table_name:
            raise ValueError('DynamoDB table name must be a non-empty string.')

        if table is None:
            resource = boto3.resource('dynamodb', region_name=region_name, endpoint_url=endpoint_url)
            table = resource.Table(table_name)

        self.table = table
        self.table_name = table_name

    @handle_dynamodb_error
    @beartype
    def insert(self, link: LinkModel, ttl_seconds: int, **kwargs) -> 'LinkDynamoDBDAO':
        item = {k: v for k, v in link.to_dict().items() if v is not None}
        item[TTL_ATTRIBUTE] = int(time.time()) + ttl_seconds
        self.table.put_item(Item=item)
        return self

    @handle_dynamodb_error
    @beartype
    def get_by_short_id(self, short_id: str, **kwargs) -> LinkModel | None:
        response = self.table.get_item(Key={'shortId': short_id})
        return self._load(response.get('Item'))

    @handle_dynamodb_error
    @beartype
    def get_by_long_url(self, long_url: str, **kwargs) -> LinkModel | None:
        response = self.table.query(
            IndexName=LONG_URL_INDEX,
            KeyConditionExpression=Key('longURL').eq(long_url),
        )
        items = response.get('Items') or []
        if not items:
            return None

        # NOTE: concurrent creates for the same URL may leave several rows;
        #       the newest one matches what the cache's last writer holds.
        newest = max(items, key=lambda item: item.get('createdAt') or '')
        return self._load(newest)

    @handle_dynamodb_error
    @beartype
    def delete(self, link: LinkModel, **kwargs) -> None:
        self.table.delete_item(Key={'shortId': link.short_id})

    @staticmethod
    def _load(item: dict[str, Any] | None) -> LinkModel | None:
        if item is None:
            return None
        try:
            return LinkModel.from_dict(item)
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptLinkRecordError('Stored link item cannot be parsed.') from e
