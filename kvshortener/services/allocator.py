"""Short link allocation

Procedure of Allocator.shorten():
    - Step 1: Validate the target URL (no side effects on failure)
    - Step 2: Consult the rate limiter, if any (the counter stays untouched on rejection)
    - Step 3: Atomically increment the global counter to obtain a fresh link id
    - Step 4: Encode the link id into its short code
    - Step 5: Persist code -> target URL
    - Step 6: Return the ShortLinkModel

NOTE: the counter increment is the only concurrency control. No lock is taken
      around steps 3-5, so concurrent callers may finish step 5 in any order.
      If step 5 fails after step 3 succeeded, the id is lost for good: ids are
      unique and increasing but not gap-free, and the failed write isn't retried.
"""

import logging

from kvshortener.models import ShortLinkModel
from kvshortener.dao.base import ShortURLBaseDAO
from kvshortener.dao.exceptions import DataStoreError
from kvshortener.exceptions import RateLimitedError, InternalError
from kvshortener.services.rate_limiter import RateLimiter
from kvshortener.utils.helpers import validate_url
from kvshortener.utils.shortener import encode


logger = logging.getLogger(__name__)


class Allocator:
    """Issue short links backed by the global counter

    Attributes:
        dao (ShortURLBaseDAO): Short link store (mapping & counter).
        rate_limiter (RateLimiter | None): Limiter consulted before allocation, None to disable.
    """

    def __init__(self, dao: ShortURLBaseDAO, rate_limiter: RateLimiter | None = None):
        self.dao = dao
        self.rate_limiter = rate_limiter

    def shorten(self, target_url: str, client_key: str | None = None) -> ShortLinkModel:
        """Shorten an absolute URL

        Args:
            target_url (str):
                URL to shorten.
            client_key (str | None):
                Requesting client identity. Required when rate limiting is enabled.

        Returns:
            ShortLinkModel: the newly issued link.

        Raises:
            ValidationError: if target_url isn't an absolute http(s) URL.
            RateLimitedError: if the client exceeded its rate.
            DataStoreError: if the counter or the mapping can't be written.

        Example:
            >>> allocator = Allocator(ShortURLRedisDAO())
            >>> allocator.shorten('https://example.com/a')   # counter was at 0
            ShortLinkModel(code='1', target='https://example.com/a', link_id=1)
        """
        target_url = validate_url(target_url)

        if self.rate_limiter is not None:
            if client_key is None:
                raise InternalError('Rate limiting requires a client key.')
            if not self.rate_limiter.allow(client_key):
                raise RateLimitedError(f"Client '{client_key}' exceeded its shortening rate.")

        link_id = self.dao.count(increment=True)
        link = ShortLinkModel(code=encode(link_id), target=target_url, link_id=link_id)

        try:
            self.dao.insert(link)
        except DataStoreError:
            logger.error('Lost link id: counter incremented but mapping not persisted.', extra={'linkId': link_id, 'code': link.code})
            raise

        logger.debug('Issued short link.', extra={'linkId': link_id, 'code': link.code})
        return link
