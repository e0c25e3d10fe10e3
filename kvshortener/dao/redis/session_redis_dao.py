"""Redis-based DAO for admin session tokens

Each username owns a Redis set under session:<username>. SADD, SREM and
SISMEMBER are atomic on a single key, so concurrent logins and logouts of
the same user never clobber each other's tokens.
"""

from beartype import beartype

from kvshortener.dao.base import SessionBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.redis_key_schema import KeyNamespace
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class SessionRedisDAO(RedisClientMixin, SessionBaseDAO):

    @handle_redis_connection_error
    @beartype
    def add(self, username: str, token: str, **kwargs) -> None:
        self.redis.sadd(self.keys.session_key(username), token)

    @handle_redis_connection_error
    @beartype
    def remove(self, username: str, token: str, **kwargs) -> bool:
        return self.redis.srem(self.keys.session_key(username), token) == 1

    @handle_redis_connection_error
    @beartype
    def contains(self, username: str, token: str, **kwargs) -> bool:
        return bool(self.redis.sismember(self.keys.session_key(username), token))

    @handle_redis_connection_error
    def count_by_user(self, **kwargs) -> dict[str, int]:
        keys = list(self.redis.scan_iter(match=self.keys.pattern(KeyNamespace.SESSION)))
        if not keys:
            return {}

        with self.redis.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.scard(key)
            sizes = pipe.execute()

        # Empty sets are deleted by Redis, but a key may vanish between SCAN and SCARD
        return {
            self.keys.identifier(KeyNamespace.SESSION, key): size
            for key, size in zip(keys, sizes)
            if size
        }
