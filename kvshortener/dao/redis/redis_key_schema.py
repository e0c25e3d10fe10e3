import functools
from collections.abc import Callable
from enum import StrEnum


__all__ = ['KeyNamespace', 'RedisKeySchema']  # hide internal decorator prefix_key from imports


class KeyNamespace(StrEnum):
    """Closed set of entity prefixes used in the key-value store."""

    COUNT = 'count'
    HOST = 'host'
    TEMPLATE = 'tpl'
    URL = 'url'
    SESSION = 'session'
    CSRF = 'csrf'
    USER = 'user'


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    Every key has the shape '<namespace>:<identifier>' where the namespace
    is a member of KeyNamespace. Any other namespace is rejected.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "kvshortener:prod" or "kvshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def key(self, namespace: KeyNamespace, identifier: str) -> str:
        if not isinstance(namespace, KeyNamespace):
            raise ValueError(f'Unknown key namespace: {namespace!r}.')
        if not identifier:
            raise ValueError('Key identifier must be a non-empty string.')
        return f'{namespace}:{identifier}'

    def counter_key(self) -> str:
        return self.key(KeyNamespace.COUNT, 'count')

    def url_key(self, code: str) -> str:
        return self.key(KeyNamespace.URL, code)

    def host_key(self, client_key: str) -> str:
        return self.key(KeyNamespace.HOST, client_key)

    def session_key(self, username: str) -> str:
        return self.key(KeyNamespace.SESSION, username)

    def csrf_key(self, username: str) -> str:
        return self.key(KeyNamespace.CSRF, username)

    def user_key(self, username: str) -> str:
        return self.key(KeyNamespace.USER, username)

    def template_key(self, template_name: str) -> str:
        return self.key(KeyNamespace.TEMPLATE, template_name)

    def pattern(self, namespace: KeyNamespace) -> str:
        """Return a SCAN/KEYS match pattern covering a whole namespace."""
        return self.key(namespace, '*')

    def identifier(self, namespace: KeyNamespace, key: str) -> str:
        """Strip the prefix and namespace from a full key

        Example:
            >>> RedisKeySchema(prefix='app:dev').identifier(KeyNamespace.URL, 'app:dev:url:abc')
            'abc'
        """
        head = self.pattern(namespace)[:-1]
        if not key.startswith(head):
            raise ValueError(f"Key '{key}' doesn't belong to namespace '{namespace}'.")
        return key[len(head):]
