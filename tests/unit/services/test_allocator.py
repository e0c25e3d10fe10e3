"""Unit tests for short link allocation and resolution

Test coverage includes:

1. Allocation
   - First link of an empty store gets id 1 and code encode(1).
   - Invalid URLs are rejected without touching the counter.
   - Rate-limited clients are rejected without touching the counter.
   - A failed write after the increment loses the id and surfaces DataStoreError.

2. Concurrency
   - Simultaneous callers receive distinct codes, each resolving to its own URL.

3. Resolution
   - Known codes resolve to the most recently stored URL; unknown ones are NotFound.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from kvshortener.models import ShortLinkModel
from kvshortener.exceptions import ValidationError, RateLimitedError, NotFoundError, InternalError
from kvshortener.dao.exceptions import DataStoreError
from kvshortener.services import Allocator, Resolver, RateLimiter
from kvshortener.utils.shortener import encode, decode


# -------------------------------
# 1. Allocation
# -------------------------------


def test_shorten_first_link(short_url_dao):
    link = Allocator(short_url_dao).shorten('https://example.com/a')

    assert link == ShortLinkModel(code=encode(1), target='https://example.com/a', link_id=1)
    assert short_url_dao.urls == {encode(1): 'https://example.com/a'}
    assert Resolver(short_url_dao).resolve(link.code) == 'https://example.com/a'


def test_shorten_issues_increasing_ids(short_url_dao):
    allocator = Allocator(short_url_dao)
    links = [allocator.shorten(f'https://example.com/{n}') for n in range(100)]

    assert [link.link_id for link in links] == list(range(1, 101))
    assert [decode(link.code) for link in links] == [(n, True) for n in range(1, 101)]


@pytest.mark.parametrize('url', ['not-a-url', '/relative', '', None, 'ftp://example.com/a'])
def test_shorten_invalid_url_leaves_counter_unchanged(short_url_dao, url):
    with pytest.raises(ValidationError):
        Allocator(short_url_dao).shorten(url)

    assert short_url_dao.counter == 0
    assert short_url_dao.urls == {}


def test_shorten_invalid_url_is_not_rate_counted(short_url_dao):
    rate_limiter = MagicMock(spec=RateLimiter)

    with pytest.raises(ValidationError):
        Allocator(short_url_dao, rate_limiter=rate_limiter).shorten('not-a-url', client_key='203.0.113.7')
    rate_limiter.allow.assert_not_called()


def test_shorten_rate_limited(short_url_dao, rate_limit_dao):
    allocator = Allocator(short_url_dao, rate_limiter=RateLimiter(rate_limit_dao, limit=3, window_seconds=60))

    allocator.shorten('https://example.com/1', client_key='203.0.113.7')
    allocator.shorten('https://example.com/2', client_key='203.0.113.7')
    with pytest.raises(RateLimitedError):
        allocator.shorten('https://example.com/3', client_key='203.0.113.7')

    assert short_url_dao.counter == 2
    # Other clients are unaffected
    assert allocator.shorten('https://example.com/4', client_key='203.0.113.8').link_id == 3


def test_shorten_rate_limited_requires_client_key(short_url_dao, rate_limit_dao):
    allocator = Allocator(short_url_dao, rate_limiter=RateLimiter(rate_limit_dao, limit=2, window_seconds=60))

    with pytest.raises(InternalError):
        allocator.shorten('https://example.com/1')


def test_shorten_lost_id(short_url_dao, monkeypatch, caplog):
    allocator = Allocator(short_url_dao)
    monkeypatch.setattr(short_url_dao, 'insert', MagicMock(side_effect=DataStoreError("Can't connect to Redis")))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(DataStoreError):
            allocator.shorten('https://example.com/a')

    assert short_url_dao.counter == 1
    assert any(getattr(record, 'linkId', None) == 1 for record in caplog.records)

    # The lost id is never reused
    monkeypatch.undo()
    assert allocator.shorten('https://example.com/b').link_id == 2


def test_shorten_counter_failure(short_url_dao, monkeypatch):
    monkeypatch.setattr(short_url_dao, 'count', MagicMock(side_effect=DataStoreError("Can't connect to Redis")))

    with pytest.raises(DataStoreError):
        Allocator(short_url_dao).shorten('https://example.com/a')
    assert short_url_dao.urls == {}


# -------------------------------
# 2. Concurrency
# -------------------------------


def test_concurrent_shortening(short_url_dao):
    allocator = Allocator(short_url_dao)
    urls = [f'https://example.com/{n}' for n in range(200)]
    barrier = threading.Barrier(8)

    def shorten(url: str) -> ShortLinkModel:
        if int(url.rsplit('/', 1)[1]) < 8:
            barrier.wait()
        return allocator.shorten(url)

    with ThreadPoolExecutor(max_workers=8) as executor:
        links = list(executor.map(shorten, urls))

    assert len({link.code for link in links}) == len(urls)
    assert sorted(link.link_id for link in links) == list(range(1, len(urls) + 1))
    resolver = Resolver(short_url_dao)
    for url, link in zip(urls, links):
        assert resolver.resolve(link.code) == url


# -------------------------------
# 3. Resolution
# -------------------------------


def test_resolve_unknown_code(short_url_dao):
    with pytest.raises(NotFoundError):
        Resolver(short_url_dao).resolve('abc')


def test_resolve_returns_latest_target(short_url_dao):
    short_url_dao.insert(ShortLinkModel(code='1', target='https://example.com/old'))
    short_url_dao.insert(ShortLinkModel(code='1', target='https://example.com/new'))

    assert Resolver(short_url_dao).resolve('1') == 'https://example.com/new'


def test_resolve_store_failure(short_url_dao, monkeypatch):
    monkeypatch.setattr(short_url_dao, 'get', MagicMock(side_effect=DataStoreError("Can't connect to Redis")))

    with pytest.raises(DataStoreError):
        Resolver(short_url_dao).resolve('1')
