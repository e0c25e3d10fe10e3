"""Unit tests for the ShortURLRedisDAO

Test coverage includes:

1. Insertion behavior
   - Validates inserting a link stores the code -> target mapping unconditionally.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms Redis connection errors raise DataStoreError.

2. Retrieval behavior
   - Ensures fetching known codes returns a populated ShortLinkModel.
   - Confirms missing keys raise ShortURLNotFoundError (a NotFoundError).
   - Confirms Redis connection errors raise DataStoreError.

3. Counter operations
   - Ensures global counter increments or retrieves correctly.
   - Confirms Redis connectivity issues raise DataStoreError.

4. Scanning
   - Ensures stored links are enumerated in batches and vanished keys skipped.
"""

from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from kvshortener.models import ShortLinkModel
from kvshortener.exceptions import NotFoundError
from kvshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError
from kvshortener.dao.redis import ShortURLRedisDAO
from kvshortener.dao.redis import short_url_redis_dao


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a ShortURLRedisDAO instance with a mocked Redis client."""
    return ShortURLRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_insert_short_url(dao, redis_client):
    link = ShortLinkModel(code='1', target='https://example.com/a', link_id=1)

    assert dao.insert(link) is dao
    redis_client.set.assert_called_once_with('testapp:test:url:1', 'https://example.com/a')
    redis_client.exists.assert_not_called()


def test_insert_short_url_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert('https://example.com/notamodel')


def test_insert_short_url_with_redis_connection_error(dao, redis_client):
    redis_client.set.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert(ShortLinkModel(code='1', target='https://example.com/a'))


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_short_url(dao, redis_client):
    redis_client.get.return_value = 'https://example.com/a'

    link = dao.get('1')

    assert link == ShortLinkModel(code='1', target='https://example.com/a')
    redis_client.get.assert_called_once_with('testapp:test:url:1')


def test_get_short_url_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(1)


def test_get_short_url_which_does_not_exist(dao, redis_client):
    redis_client.get.return_value = None

    with pytest.raises(ShortURLNotFoundError, match="Short URL with code 'abc' not found.") as exc_info:
        dao.get('abc')
    assert isinstance(exc_info.value, NotFoundError)


def test_get_short_url_with_redis_timeout(dao, redis_client):
    redis_client.get.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')

    with pytest.raises(DataStoreError):
        dao.get('abc')


# -------------------------------
# 3. Counter operations
# -------------------------------


def test_count_with_increment(dao, redis_client):
    redis_client.incr.return_value = 42

    assert dao.count(increment=True) == 42
    redis_client.incr.assert_called_once_with('testapp:test:count:count')
    redis_client.get.assert_not_called()


def test_count_without_increment(dao, redis_client):
    redis_client.get.return_value = '42'

    assert dao.count() == 42
    redis_client.get.assert_called_once_with('testapp:test:count:count')
    redis_client.incr.assert_not_called()


def test_count_before_first_link(dao, redis_client):
    redis_client.get.return_value = None
    assert dao.count() == 0


def test_count_with_redis_connection_error(dao, redis_client):
    redis_client.incr.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.count(increment=True)


# -------------------------------
# 4. Scanning
# -------------------------------


def test_scan(dao, redis_client):
    redis_client.scan_iter.return_value = iter(['testapp:test:url:1', 'testapp:test:url:2', 'testapp:test:url:3'])
    redis_client.mget.return_value = ['https://example.com/1', None, 'https://example.com/3']

    links = dao.scan()

    assert links == [
        ShortLinkModel(code='1', target='https://example.com/1'),
        ShortLinkModel(code='3', target='https://example.com/3'),
    ]
    redis_client.scan_iter.assert_called_once_with(match='testapp:test:url:*', count=short_url_redis_dao.SCAN_BATCH_SIZE)


def test_scan_in_batches(monkeypatch, dao, redis_client):
    monkeypatch.setattr(short_url_redis_dao, 'SCAN_BATCH_SIZE', 2)
    keys = [f'testapp:test:url:{code}' for code in 'abc']
    redis_client.scan_iter.return_value = iter(keys)
    redis_client.mget.side_effect = [['https://a.example', 'https://b.example'], ['https://c.example']]

    links = dao.scan()

    assert [link.code for link in links] == ['a', 'b', 'c']
    assert redis_client.mget.call_args_list == [call(keys[:2]), call(keys[2:])]


def test_scan_without_links(dao, redis_client):
    redis_client.scan_iter.return_value = iter([])

    assert dao.scan() == []
    redis_client.mget.assert_not_called()
