"""Shared fixtures: in-memory DAOs emulating the atomic single-key operations of the key-value store"""

import time
import threading

import pytest

from kvshortener.models import ShortLinkModel, RateLockModel
from kvshortener.dao.base import ShortURLBaseDAO, UserBaseDAO, SessionBaseDAO, CSRFBaseDAO, RateLimitBaseDAO
from kvshortener.dao.exceptions import ShortURLNotFoundError, UserDoesNotExistError


class InMemoryShortURLDAO(ShortURLBaseDAO):
    def __init__(self):
        self.lock = threading.Lock()
        self.counter = 0
        self.urls: dict[str, str] = {}

    def insert(self, link, **kwargs):
        with self.lock:
            self.urls[link.code] = link.target
        return self

    def get(self, code, **kwargs):
        with self.lock:
            target = self.urls.get(code)
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{code}' not found.")
        return ShortLinkModel(code=code, target=target)

    def count(self, increment=False, **kwargs):
        with self.lock:
            if increment:
                self.counter += 1
            return self.counter

    def scan(self, **kwargs):
        with self.lock:
            return [ShortLinkModel(code=code, target=target) for code, target in self.urls.items()]


class InMemoryUserDAO(UserBaseDAO):
    def __init__(self):
        self.users: dict[str, str] = {}

    def password_hash(self, username, **kwargs):
        if username not in self.users:
            raise UserDoesNotExistError(f"User '{username}' does not exist.")
        return self.users[username]

    def set_password_hash(self, username, password_hash, **kwargs):
        created = username not in self.users
        self.users[username] = password_hash
        return created


class InMemorySessionDAO(SessionBaseDAO):
    def __init__(self):
        self.sessions: dict[str, set[str]] = {}

    def add(self, username, token, **kwargs):
        self.sessions.setdefault(username, set()).add(token)

    def remove(self, username, token, **kwargs):
        tokens = self.sessions.get(username, set())
        if token not in tokens:
            return False
        tokens.discard(token)
        if not tokens:
            del self.sessions[username]
        return True

    def contains(self, username, token, **kwargs):
        return token in self.sessions.get(username, set())

    def count_by_user(self, **kwargs):
        return {username: len(tokens) for username, tokens in self.sessions.items()}


class _ExpiringStore:
    """Values with an optional TTL, expired lazily against time.time() (freezegun friendly)"""

    def __init__(self):
        self.values: dict[str, tuple[object, float | None]] = {}

    def get(self, key):
        value, expires_at = self.values.get(key, (None, None))
        if expires_at is not None and time.time() >= expires_at:
            del self.values[key]
            return None
        return value

    def ttl(self, key):
        _, expires_at = self.values[key]
        return -1 if expires_at is None else int(expires_at - time.time())


class InMemoryCSRFDAO(CSRFBaseDAO):
    def __init__(self):
        self.store = _ExpiringStore()

    def get(self, username, **kwargs):
        return self.store.get(username)

    def set_if_absent(self, username, token, ttl, **kwargs):
        if self.store.get(username) is None:
            self.store.values[username] = (token, time.time() + ttl)
        return self.store.get(username)


class InMemoryRateLimitDAO(RateLimitBaseDAO):
    def __init__(self):
        self.store = _ExpiringStore()

    def hit(self, client_key, window_seconds, **kwargs):
        count = self.store.get(client_key)
        if count is None:
            self.store.values[client_key] = (1, time.time() + window_seconds)
            return 1
        _, expires_at = self.store.values[client_key]
        self.store.values[client_key] = (count + 1, expires_at)
        return count + 1

    def locks(self, **kwargs):
        return [
            RateLockModel(client_key=key, count=self.store.get(key), ttl=self.store.ttl(key))
            for key in list(self.store.values)
            if self.store.get(key) is not None
        ]


@pytest.fixture
def short_url_dao():
    return InMemoryShortURLDAO()


@pytest.fixture
def user_dao():
    return InMemoryUserDAO()


@pytest.fixture
def session_dao():
    return InMemorySessionDAO()


@pytest.fixture
def csrf_dao():
    return InMemoryCSRFDAO()


@pytest.fixture
def rate_limit_dao():
    return InMemoryRateLimitDAO()
