"""Redis mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize a Redis client backed by a bounded, blocking connection pool
    - Healthcheck Redis client

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Functions:
    - connection_pool(...): Return the (memoised) blocking connection pool for a set of parameters.

Example:
    Typical usage with a DAO implementation:

        >>> class SessionRedisDAO(RedisClientMixin, SessionBaseDAO):
        ...     pass
        ...
        >>> dao = SessionRedisDAO(prefix="myapp:prod")
        >>> dao._healthcheck()
        True
"""

import functools
from typing import Optional

import redis

from kvshortener.constants import Defaults
from kvshortener.dao.redis.redis_key_schema import RedisKeySchema
from kvshortener.dao.exceptions import DataStoreError


@functools.lru_cache(maxsize=8)
def connection_pool(
    host: str,
    port: int,
    db: int,
    decode_responses: bool,
    username: Optional[str],
    password: Optional[str],
    max_connections: int,
    timeout: int,
) -> redis.BlockingConnectionPool:
    """Return a blocking connection pool for the given connection parameters

    Callers block for up to `timeout` seconds when all `max_connections`
    connections are borrowed; after that Redis raises ConnectionError. The same
    timeout bounds every socket read/write so no request waits on Redis forever.

    Pools are memoised so all DAOs of a warm process share their connections.
    """
    return redis.BlockingConnectionPool(
        host=host,
        port=port,
        db=db,
        decode_responses=decode_responses,
        username=username,
        password=password,
        max_connections=max_connections,
        timeout=timeout,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )


class RedisClientMixin:
    """Shared Redis client and key schema for the Redis DAOs

    Attributes:
        redis (redis.Redis): Client bound to a shared blocking connection pool.
        keys (RedisKeySchema): Builder of namespaced (and optionally prefixed) keys.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_max_connections: Optional[int] = Defaults.REDIS_MAX_CONNECTIONS,
        redis_timeout: Optional[int] = Defaults.REDIS_TIMEOUT,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis and check the connection

        The redis_* keyword arguments are the `redis` section of a function's
        configuration (see AppSettings.redis_config). An injected redis_client
        takes precedence over them and is used as is.

        Raises:
            DataStoreError: if Redis doesn't answer PING.
        """
        if redis_client is None:
            pool = connection_pool(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                max_connections=int(redis_max_connections),
                timeout=int(redis_timeout),
            )
            redis_client = redis.Redis(connection_pool=pool)

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: whether Redis answered. Only returns False when raise_error is False.

        Raises:
            DataStoreError: if Redis is unreachable and raise_error is True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                raise DataStoreError(
                    f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
