from typing import cast
from collections.abc import Callable

import pytest
from pytest import MonkeyPatch

from kvshortener.types import LambdaEvent, LambdaContext, LambdaConfiguration


@pytest.fixture(autouse=True)
def deployed_environment(monkeypatch: MonkeyPatch) -> None:
    # Unhandled errors become 500 responses instead of propagating
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('APP_NAME', raising=False)


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test'})


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(
        LambdaConfiguration,
        {
            'site': 'https://sho.rt',
            'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
            'rate': {'active': True, 'count': 3, 'interval': 60},
            'csrf_timeout': 3600,
        },
    )


@pytest.fixture
def make_event() -> Callable[..., LambdaEvent]:
    def _make_event(method: str = 'GET', cookie: str | None = None, body: str | None = None) -> LambdaEvent:
        headers = {'Content-Type': 'application/x-www-form-urlencoded', 'User-Agent': 'pytest'}
        if cookie is not None:
            headers['Cookie'] = f'session={cookie}'
        return cast(
            LambdaEvent,
            {
                'httpMethod': method,
                'path': '/admin/',
                'headers': headers,
                'requestContext': {'domainName': 'sho.rt', 'stage': 'test', 'identity': {'sourceIp': '203.0.113.7'}},
                'body': body,
            },
        )

    return _make_event
