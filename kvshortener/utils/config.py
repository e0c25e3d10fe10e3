"""Utility functions for application configuration management.

Each Lambda function reads its own section of one JSON configuration
document. The document is looked up, in order, in:

    1. a local JSON file named by `KVSHORTENER_CONFIG_FILE` (plain local runs);
    2. a local AppConfig agent (`APPCONFIG_AGENT_URL`, under SAM);
    3. AWS AppConfig via boto3.

The configuration JSON follows this structure:

    {
        "build": "2026.10.19",
        "configs": {
            "shorten_url": {
                "site": "https://sho.rt",
                "redis": {"host": "...", "port": 6379, "db": 0, "max_connections": 16, "timeout": 5},
                "rate": {"active": true, "count": 10, "interval": 60, "check_user_agent": false}
            },
            "admin_login": {
                "redis": { ... },
                "csrf_timeout": 3600
            }
        }
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory.

    load_config(function_name: str) -> dict
        Load the configuration section of a given Lambda function.

Classes:
    RateSettings, AppSettings
        Validated views over a configuration section.

Example:
    Typical usage inside a Lambda handler:

        >>> from kvshortener.utils.config import load_config, AppSettings
        >>> settings = AppSettings.from_config(load_config('shorten_url'))
        >>> settings.rate.count
        10
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from collections.abc import Callable

import boto3

from kvshortener.constants import ENV, Defaults
from kvshortener.exceptions import BadConfigurationError
from kvshortener.types import AppConfig, LambdaConfiguration
from kvshortener.utils.helpers import require_environment
from kvshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

REDIS_OPTIONS = frozenset({'host', 'port', 'db', 'username', 'password', 'max_connections', 'timeout'})


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Finds the project root via the environment variable PROJECT_ROOT.
    Falls back to the directory of this file.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'kvshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'kvshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _function_section(document: AppConfig, function_name: str) -> LambdaConfiguration:
    try:
        return document['configs'][function_name]
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"Configuration for '{function_name}' not found.") from e


def _load_local_config_file(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load configuration from a local JSON file when `KVSHORTENER_CONFIG_FILE` is set

    Raises:
        FileNotFoundError: if the configured file doesn't exist.
        BadConfigurationError: if the file isn't valid JSON or lacks the function's section.
    """

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> dict:
        config_file = os.getenv(ENV.App.CONFIG_FILE)
        if not config_file:
            return func(function_name, *args, **kwargs)

        path = Path(config_file.strip()).expanduser().resolve()
        logger.debug('Trying to load configuration from local file.', extra={'path': str(path), 'functionName': function_name})
        with path.open('r', encoding='utf-8') as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise BadConfigurationError(f'Malformed configuration file {path}.') from e
        return _function_section(document, function_name)

    return wrapper


# A local AppConfig agent is only trusted on loopback or the Docker host, on its default port
_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal'})
_AGENT_PORT = 2772


def _agent_url() -> str | None:
    """Return the validated `APPCONFIG_AGENT_URL`, None when unset

    Raises:
        BadConfigurationError: if the URL points anywhere but a local agent.
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url:
        return None

    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'} or components.hostname not in _AGENT_HOSTS or components.port not in {_AGENT_PORT, None}:
        raise BadConfigurationError(f'Refusing non-local AppConfig agent URL {url}.')
    return url.rstrip('/')


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: under SAM, fetch the document from the local AppConfig agent instead of AWS"""

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> dict:
        agent_url = _agent_url() if running_locally() else None
        if agent_url is None:
            return func(function_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'
        logger.debug('Loading configuration from local AppConfig agent.', extra={'agentUrl': url, 'functionName': function_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)
        return _function_section(document, function_name)

    return wrapper


@_load_local_config_file
@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(function_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        function_name (str):
            Name of the Lambda (e.g., "shorten_url" or "admin_login").

    Returns:
        dict: The function's config section as a Python dictionary.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'functionName': function_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'functionName': function_name, 'build': document.get('build')})
    return _function_section(document, function_name)


def _positive_int(section: dict[str, Any], name: str, default: int, where: str) -> int:
    value = section.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BadConfigurationError(f"Invalid '{where}.{name}' value: {value!r} (expected a positive integer).")
    return value


def _bool(section: dict[str, Any], name: str, default: bool, where: str) -> bool:
    value = section.get(name, default)
    if not isinstance(value, bool):
        raise BadConfigurationError(f"Invalid '{where}.{name}' value: {value!r} (expected true or false).")
    return value


@dataclass(frozen=True)
class RateSettings:
    """Shortening rate limit settings

    Attributes:
        active (bool): Whether shortening requests are rate limited at all.
        count (int): Requests pass while the window count stays below it (the first always passes).
        interval (int): Window length in seconds.
        check_user_agent (bool): Whether the user agent is part of the client identity.
    """

    active: bool = False
    count: int = Defaults.RATE_LIMIT_COUNT
    interval: int = Defaults.RATE_LIMIT_INTERVAL
    check_user_agent: bool = False

    @classmethod
    def from_config(cls, section: dict[str, Any] | None) -> 'RateSettings':
        section = section or {}
        return cls(
            active=_bool(section, 'active', False, 'rate'),
            count=_positive_int(section, 'count', Defaults.RATE_LIMIT_COUNT, 'rate'),
            interval=_positive_int(section, 'interval', Defaults.RATE_LIMIT_INTERVAL, 'rate'),
            check_user_agent=_bool(section, 'check_user_agent', False, 'rate'),
        )


@dataclass(frozen=True)
class AppSettings:
    """Validated configuration section of one Lambda function

    Attributes:
        redis (dict): Redis connection options (see REDIS_OPTIONS).
        site (str | None): Public base URL of short links, without trailing '/'.
        rate (RateSettings): Shortening rate limit settings.
        csrf_timeout (int): CSRF token lifetime in seconds.
    """

    redis: dict[str, Any] = field(default_factory=dict)
    site: str | None = None
    rate: RateSettings = field(default_factory=RateSettings)
    csrf_timeout: int = Defaults.CSRF_TIMEOUT

    @property
    def redis_config(self) -> dict[str, Any]:
        """Redis options as keyword arguments of RedisClientMixin"""
        return {f'redis_{k}': v for k, v in self.redis.items()}

    def secure(self, fallback_url: str) -> bool:
        """Whether cookies must carry the Secure flag (site served over https)"""
        return (self.site or fallback_url).lower().startswith('https://')

    @classmethod
    def from_config(cls, config: LambdaConfiguration) -> 'AppSettings':
        """Validate a configuration section

        Raises:
            BadConfigurationError: on unknown Redis options or invalid values.
        """
        if not isinstance(config, dict):
            raise BadConfigurationError('Configuration section must be a JSON object.')

        redis_section = config.get('redis')
        if not isinstance(redis_section, dict):
            raise BadConfigurationError("Missing 'redis' configuration.")
        unknown = set(redis_section) - REDIS_OPTIONS
        if unknown:
            raise BadConfigurationError(f"Unknown 'redis' options: {', '.join(sorted(unknown))}.")
        db = redis_section.get('db', 0)
        if isinstance(db, bool) or not isinstance(db, int) or db < 0:
            raise BadConfigurationError(f"Invalid 'redis.db' value: {db!r}.")
        _positive_int(redis_section, 'max_connections', Defaults.REDIS_MAX_CONNECTIONS, 'redis')
        _positive_int(redis_section, 'timeout', Defaults.REDIS_TIMEOUT, 'redis')

        site = config.get('site')
        if site is not None:
            if not isinstance(site, str) or not site.strip('/ '):
                raise BadConfigurationError("Invalid 'site' value (expected a non-empty URL).")
            site = site.rstrip('/ ')

        return cls(
            redis=dict(redis_section),
            site=site,
            rate=RateSettings.from_config(config.get('rate')),
            csrf_timeout=_positive_int(config, 'csrf_timeout', Defaults.CSRF_TIMEOUT, 'config'),
        )
