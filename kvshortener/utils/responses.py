"""API Gateway (Lambda proxy) response builders

Functions:
    response_json(status_code, body, headers=None, cookies=None) -> LambdaResponse
    response_error(error, message=None) -> LambdaResponse
    response_500(message=None, error_code=None) -> LambdaResponse
    response_302(location, cookies=None) -> LambdaResponse
    response_csv(content, filename) -> LambdaResponse

Cookies are emitted through `multiValueHeaders` since API Gateway collapses
repeated keys of the plain `headers` mapping.
"""

import json
from http import HTTPStatus
from typing import Any

from kvshortener.types import LambdaResponse
from kvshortener.exceptions import KVShortenerError


def _with_cookies(response: LambdaResponse, cookies: list[str] | None) -> LambdaResponse:
    if cookies:
        response['multiValueHeaders'] = {'Set-Cookie': list(cookies)}
    return response


def response_json(
    status_code: int,
    body: dict[str, Any],
    headers: dict[str, str] | None = None,
    cookies: list[str] | None = None,
) -> LambdaResponse:
    response = {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json; charset=UTF-8', **(headers or {})},
        'body': json.dumps(body),
    }
    return _with_cookies(response, cookies)


def response_error(
    error: KVShortenerError,
    message: str | None = None,
    cookies: list[str] | None = None,
) -> LambdaResponse:
    """Build an error response from an application exception

    Only the HTTP reason phrase (optionally extended with `message`) is
    returned to the client. Exception details stay in the logs.
    """
    base = HTTPStatus(error.status_code).phrase
    body = {
        'message': base if not message else f'{base} ({message})',
        'errorCode': error.error_code,
    }
    return response_json(error.status_code, body, cookies=cookies)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return response_json(500, body)


def response_302(*, location: str, cookies: list[str] | None = None) -> LambdaResponse:
    response = {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': '',  # no body needed for redirects
    }
    return _with_cookies(response, cookies)


def response_csv(content: str, filename: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'text/csv; charset=UTF-8',
            'Content-Disposition': f'attachment; filename="{filename}"',
        },
        'body': content,
    }
