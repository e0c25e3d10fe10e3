"""Unit tests for the CSRFRedisDAO

Test coverage includes:
    1. Token retrieval (GET csrf:<username>)
    2. Atomic set-if-absent returning the stored token (MULTI: SET NX EX + GET)
    3. Error translation
"""

import pytest
import redis

from kvshortener.dao.exceptions import DataStoreError
from kvshortener.dao.redis import CSRFRedisDAO


@pytest.fixture
def dao(redis_client, app_prefix):
    return CSRFRedisDAO(redis_client=redis_client, prefix=app_prefix)


def test_get(dao, redis_client):
    redis_client.get.return_value = 'token-1'

    assert dao.get('admin') == 'token-1'
    redis_client.get.assert_called_once_with('testapp:test:csrf:admin')


def test_get_missing_token(dao, redis_client):
    redis_client.get.return_value = None
    assert dao.get('admin') is None


def test_set_if_absent_stores_new_token(dao, redis_client):
    redis_client.execute.return_value = [True, 'token-1']

    assert dao.set_if_absent('admin', 'token-1', 3600) == 'token-1'
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.set.assert_called_once_with('testapp:test:csrf:admin', 'token-1', nx=True, ex=3600)
    redis_client.get.assert_called_once_with('testapp:test:csrf:admin')


def test_set_if_absent_returns_concurrently_stored_token(dao, redis_client):
    # SET NX lost the race: the transaction returns the winner's token
    redis_client.execute.return_value = [None, 'token-winner']

    assert dao.set_if_absent('admin', 'token-loser', 3600) == 'token-winner'


def test_set_if_absent_with_redis_connection_error(dao, redis_client):
    redis_client.execute.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        dao.set_if_absent('admin', 'token-1', 3600)
