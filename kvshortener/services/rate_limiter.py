"""Per-client rate limiting of shortening requests

The limiter is a fixed window started by a client's first request: the
client's counter is created with a TTL of `window_seconds` and every request
increments it. The first request of a window always passes; later ones pass
while the counter stays below `limit`.

NOTE: this is an approximation of a sliding window. A client can send
      `limit - 1` requests at the very end of one window and `limit - 1` more
      at the start of the next one, bursting up to 2 * (limit - 1) requests
      across the boundary.

Client identity is the network address, optionally combined with a digest of
the user agent. This only raises the bar against trivial evasion and isn't a
security boundary: both values are under the client's control.
"""

import logging

import xxhash

from kvshortener.dao.base import RateLimitBaseDAO


logger = logging.getLogger(__name__)


class RateLimiter:
    """Bound how many requests a client may issue per time window

    Attributes:
        dao (RateLimitBaseDAO): Store of per-client request counters.
        limit (int): Requests pass while the window count stays below it.
        window_seconds (int): Window length.
        check_user_agent (bool): Whether client_key() includes the user agent.

    Example:
        >>> limiter = RateLimiter(RateLimitRedisDAO(), limit=3, window_seconds=60)
        >>> key = limiter.client_key('203.0.113.7')
        >>> limiter.allow(key), limiter.allow(key), limiter.allow(key)
        (True, True, False)
    """

    def __init__(self, dao: RateLimitBaseDAO, limit: int, window_seconds: int, check_user_agent: bool = False):
        if limit < 1:
            raise ValueError(f'Rate limit must be a positive integer (given value: {limit}).')
        if window_seconds < 1:
            raise ValueError(f'Rate limit window must be a positive integer (given value: {window_seconds}).')

        self.dao = dao
        self.limit = limit
        self.window_seconds = window_seconds
        self.check_user_agent = check_user_agent

    def client_key(self, address: str, user_agent: str | None = None) -> str:
        """Derive a client identity

        Returns the address, or '<address>:ua:<xxh64 hex digest>' when user
        agents are part of the identity.
        """
        if not self.check_user_agent:
            return address
        return f'{address}:ua:{xxhash.xxh64_hexdigest(user_agent or "")}'

    def allow(self, client_key: str, limit: int | None = None, window_seconds: int | None = None) -> bool:
        """Count a request of the client and decide whether it may proceed

        The first request of a window creates the counter (with its expiry)
        and always passes. Later requests pass while the count stays below
        `limit`, so a limit of 1 behaves like a limit of 2.

        Args:
            client_key (str): Client identity, see client_key().
            limit (int | None): Overrides the configured limit.
            window_seconds (int | None): Overrides the configured window.

        Raises:
            DataStoreError: if the request counter can't be updated.
        """
        limit = limit if limit is not None else self.limit
        window_seconds = window_seconds if window_seconds is not None else self.window_seconds
        count = self.dao.hit(client_key, window_seconds)
        allowed = count == 1 or count < limit
        if not allowed:
            logger.info('Client exceeded rate limit.', extra={'clientKey': client_key, 'count': count, 'limit': limit})
        return allowed
