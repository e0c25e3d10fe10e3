"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO.

Responsibilities:
    - Insert and retrieve short links from Redis;
    - Increment the global counter (the only cross-request shared integer);
    - Enumerate stored links for export;
    - Raise appropriate DAO exceptions.

Key layout:
    count:count     -> integer counter, INCR only
    url:<code>      -> target URL string

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from kvshortener.models import ShortLinkModel
    >>> from kvshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")
    >>> dao.count(increment=True)
    1
    >>> dao.insert(ShortLinkModel(code='1', target='https://example.com/page', link_id=1))
    <ShortURLRedisDAO>
    >>> dao.get('1').target
    'https://example.com/page'
"""

from beartype import beartype

from kvshortener.models import ShortLinkModel
from kvshortener.dao.base import ShortURLBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.redis_key_schema import KeyNamespace
from kvshortener.dao.redis.helpers import handle_redis_connection_error
from kvshortener.dao.exceptions import ShortURLNotFoundError


# Number of keys requested per SCAN / MGET round trip
SCAN_BATCH_SIZE = 500


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link mappings

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(link: ShortLinkModel, **kwargs) -> ShortURLRedisDAO:
            SET the code -> target mapping (overwrite semantics).

        get(code: str, **kwargs) -> ShortLinkModel:
            GET the mapping. Raises ShortURLNotFoundError on nil.

        count(increment: bool = False, **kwargs) -> int:
            INCR (or GET) the global counter.

        scan(**kwargs) -> list[ShortLinkModel]:
            SCAN url:* keys and MGET their targets in batches.

    All methods raise DataStoreError on Redis failures.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, link: ShortLinkModel, **kwargs) -> 'ShortURLRedisDAO':
        """Store a short link mapping in Redis

        The write is unconditional. Codes come from a strictly increasing
        counter so two different links never share a key.

        Args:
            link (ShortLinkModel):
                ShortLinkModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis connection issue occurs.
        """
        self.redis.set(self.keys.url_key(link.code), link.target)
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, code: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored short link by code

        Args:
            code (str):
                The short code of the link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkModel:
                The retrieved ShortLinkModel instance if found.

        Raises:
            ShortURLNotFoundError:
                If the short link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        target = self.redis.get(self.keys.url_key(code))
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{code}' not found.")
        return ShortLinkModel(code=code, target=target)

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global short link counter

        NOTE: the counter is only ever mutated through INCR. It's never read,
              modified and written back by the application, so concurrent
              callers always receive distinct values.

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.
            **kwargs:
                Optional keyword arguments.

        Returns:
            int:
                The updated or current global counter value.

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        value = self.redis.get(self.keys.counter_key())
        return int(value) if value is not None else 0

    @handle_redis_connection_error
    def scan(self, **kwargs) -> list[ShortLinkModel]:
        """List every stored short link

        Keys which disappear between SCAN and MGET are skipped.

        Returns:
            list[ShortLinkModel]:
                Stored links in Redis SCAN order.
        """
        keys = list(self.redis.scan_iter(match=self.keys.pattern(KeyNamespace.URL), count=SCAN_BATCH_SIZE))

        links = []
        for start in range(0, len(keys), SCAN_BATCH_SIZE):
            batch = keys[start:start + SCAN_BATCH_SIZE]
            for key, target in zip(batch, self.redis.mget(batch)):
                if target is None:
                    continue
                links.append(ShortLinkModel(code=self.keys.identifier(KeyNamespace.URL, key), target=target))
        return links
