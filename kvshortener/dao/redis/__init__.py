from kvshortener.dao.redis.redis_key_schema import KeyNamespace, RedisKeySchema
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from kvshortener.dao.redis.user_redis_dao import UserRedisDAO
from kvshortener.dao.redis.session_redis_dao import SessionRedisDAO
from kvshortener.dao.redis.csrf_redis_dao import CSRFRedisDAO
from kvshortener.dao.redis.rate_limit_redis_dao import RateLimitRedisDAO


__all__ = [
    'KeyNamespace',
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
    'UserRedisDAO',
    'SessionRedisDAO',
    'CSRFRedisDAO',
    'RateLimitRedisDAO',
]
