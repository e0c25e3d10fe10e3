"""Redis-based DAO for per-client request counters

Key layout:
    host:<client key>   -> integer request count, expires with its window

Classes:
    RateLimitRedisDAO:
        Count requests per client and list the live counters.

Example:
    >>> dao = RateLimitRedisDAO(prefix='app:dev')
    >>> dao.hit('203.0.113.7', window_seconds=60)
    1
    >>> dao.hit('203.0.113.7', window_seconds=60)
    2
    >>> dao.locks()
    [RateLockModel(client_key='203.0.113.7', count=2, ttl=58)]
"""

from beartype import beartype

from kvshortener.models import RateLockModel
from kvshortener.dao.base import RateLimitBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.redis_key_schema import KeyNamespace
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class RateLimitRedisDAO(RedisClientMixin, RateLimitBaseDAO):

    @handle_redis_connection_error
    @beartype
    def hit(self, client_key: str, window_seconds: int, **kwargs) -> int:
        """Increment the client's request counter

        NOTE: INCR and EXPIRE NX are executed as one transaction. Running them
              separately can leave a counter without expiry when the process
              dies in between, locking the client out forever:

              (request 1): INCR host:<client>  => 1
              ... interruption (timeout, crash)
              (request 2): INCR host:<client>  => 2 (no TTL, window never ends)

              EXPIRE NX only sets a TTL on keys without one, so the window is
              fixed by the first request and later requests don't extend it.

        Args:
            client_key (str):
                Client identity (network address, optionally with user agent digest).
            window_seconds (int):
                Lifetime of a newly created counter.

        Returns:
            int:
                The request count within the current window, including this request.
        """
        host_key = self.keys.host_key(client_key)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(host_key)
            pipe.expire(host_key, window_seconds, nx=True)
            count, _ = pipe.execute()
        return int(count)

    @handle_redis_connection_error
    def locks(self, **kwargs) -> list[RateLockModel]:
        keys = list(self.redis.scan_iter(match=self.keys.pattern(KeyNamespace.HOST)))
        if not keys:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.get(key)
                pipe.ttl(key)
            replies = pipe.execute()

        locks = []
        for key, count, ttl in zip(keys, replies[::2], replies[1::2]):
            if count is None or ttl == -2:  # expired between SCAN and GET
                continue
            locks.append(RateLockModel(client_key=self.keys.identifier(KeyNamespace.HOST, key), count=int(count), ttl=ttl))
        return locks
