"""Helper utilities for AWS lambda functions.

Functions:
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(code, event, site=None) -> str
        Get string representation of short URL for a given short code
    validate_url(raw) -> str
        Validate an absolute http(s) URL submitted for shortening
    header(event, name) -> str | None
        Case-insensitive request header lookup
    request_params(event) -> dict[str, str]
        Merge query string and JSON/form body parameters
    client_address(event) -> str
        Extract the client's network address
    get_cookie(event, name) -> str | None
        Read a request cookie
    build_cookie(name, value, secure, max_age=None) -> str
        Serialize an HttpOnly, path-scoped Set-Cookie header value
    clear_cookie(name, secure) -> str
        Serialize a Set-Cookie header value dropping the cookie
    request_method(event) -> str
        HTTP method of a REST (v1) or HTTP API (v2) event
    require_environment(*names) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn uncaught handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from kvshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import base64
import logging
import functools
from http.cookies import SimpleCookie, CookieError
from urllib.parse import urlsplit, parse_qsl
from collections.abc import Callable

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from kvshortener.exceptions import MissingEnvironmentVariableError, ValidationError
from kvshortener.utils.runtime import running_locally
from kvshortener.utils.responses import response_500


logger = logging.getLogger(__name__)

ALLOWED_URL_SCHEMES = frozenset({'http', 'https'})
MAX_URL_LENGTH = 4096


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(code: str, event: LambdaEvent, site: str | None = None) -> str:
    """Get string representation of shortened URL

    Args:
        code (str): short code
        event (dict): API Gateway event object passed to Lambda handler
        site (str | None): configured public site, preferred over the event's domain

    Returns:
        str: short url string representation
    """
    return f'{(site or base_url(event)).rstrip("/")}/{code}'


def validate_url(raw: str | None) -> str:
    """Validate a URL submitted for shortening

    Only absolute http(s) URLs with a host are accepted.

    Returns:
        str: the normalized (stripped) URL

    Raises:
        ValidationError: on missing, relative or otherwise malformed URLs.

    Example:
        >>> validate_url('https://example.com/a')
        'https://example.com/a'
        >>> validate_url('not-a-url')
        Traceback (most recent call last):
            ...
        kvshortener.exceptions.ValidationError: not absolute url
    """
    if not raw or not isinstance(raw, str) or not raw.strip():
        raise ValidationError('not url')

    url = raw.strip()
    if len(url) > MAX_URL_LENGTH:
        raise ValidationError('too long url')

    try:
        components = urlsplit(url)
        components.port  # noqa: B018 raises ValueError on malformed ports
    except ValueError as e:
        raise ValidationError('invalid url') from e

    if not components.scheme or not components.netloc:
        raise ValidationError('not absolute url')
    if components.scheme.lower() not in ALLOWED_URL_SCHEMES:
        raise ValidationError('unsupported url scheme')
    if not components.hostname:
        raise ValidationError('invalid url')
    return url


def header(event: LambdaEvent, name: str) -> str | None:
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _raw_body(event: LambdaEvent) -> str:
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body).decode('utf-8')
        except ValueError as e:
            raise ValidationError('invalid body encoding') from e
    return body


def request_params(event: LambdaEvent) -> dict[str, str]:
    """Merge query string and body parameters of a request

    The body is parsed as JSON when the Content-Type says so, otherwise as
    an urlencoded form. Body parameters take precedence.

    Raises:
        ValidationError: if a JSON body is malformed or isn't an object.
    """
    params = dict(event.get('queryStringParameters') or {})

    body = _raw_body(event)
    if not body:
        return params

    content_type = (header(event, 'Content-Type') or '').lower()
    if 'application/json' in content_type:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ValidationError('invalid JSON body') from e
        if not isinstance(data, dict):
            raise ValidationError('JSON body must be an object')
        params.update({key: value for key, value in data.items() if isinstance(value, str)})
    else:
        params.update(parse_qsl(body, keep_blank_values=True))
    return params


def client_address(event: LambdaEvent) -> str:
    """Extract the client's network address from the request context"""
    request_context = event.get('requestContext', {})
    address = request_context.get('identity', {}).get('sourceIp')  # REST API (v1 payload)
    if not address:
        address = request_context.get('http', {}).get('sourceIp')  # HTTP API (v2 payload)
    if not address:
        raise ValidationError('unknown client address')
    return address


def get_cookie(event: LambdaEvent, name: str) -> str | None:
    raw_cookies = list(event.get('cookies') or [])  # HTTP API (v2 payload)
    cookie_header = header(event, 'Cookie')
    if cookie_header:
        raw_cookies.append(cookie_header)

    jar = SimpleCookie()
    for raw in raw_cookies:
        try:
            jar.load(raw)
        except CookieError:
            logger.debug('Ignoring malformed Cookie header.', extra={'cookie': name})
    morsel = jar.get(name)
    return morsel.value if morsel is not None else None


def build_cookie(name: str, value: str, secure: bool, max_age: int | None = None) -> str:
    """Serialize a Set-Cookie header value

    Cookies are HttpOnly and scoped to the whole site. Passing max_age=0
    instructs the browser to drop the cookie immediately.
    """
    jar = SimpleCookie()
    jar[name] = value
    morsel = jar[name]
    morsel['path'] = '/'
    morsel['httponly'] = True
    if secure:
        morsel['secure'] = True
    if max_age is not None:
        morsel['max-age'] = max_age
    return morsel.OutputString()


def clear_cookie(name: str, secure: bool) -> str:
    return build_cookie(name, '', secure, max_age=0)


def request_method(event: LambdaEvent) -> str:
    method = event.get('httpMethod') or event.get('requestContext', {}).get('http', {}).get('method') or 'GET'
    return method.upper()


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with a generic 500 when a handler raises

    When running locally the original exception is re-raised to ease debugging.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.')
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
