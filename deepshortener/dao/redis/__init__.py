from deepshortener.dao.redis.redis_key_schema import RedisKeySchema
from deepshortener.dao.redis.mixins import RedisClientMixin
from deepshortener.dao.redis.link_redis_dao import LinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
]
