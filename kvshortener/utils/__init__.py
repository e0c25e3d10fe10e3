from kvshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config, AppSettings, RateSettings
from kvshortener.utils.helpers import (
    base_url,
    get_short_url,
    validate_url,
    request_params,
    client_address,
    header,
    get_cookie,
    build_cookie,
    clear_cookie,
    request_method,
    require_environment,
    guarantee_500_response,
)
from kvshortener.utils.shortener import encode, decode, is_valid_code
from kvshortener.utils.logging import initialize_logging, log_request


__all__ = [
    'encode',
    'decode',
    'is_valid_code',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'AppSettings',
    'RateSettings',
    'base_url',
    'get_short_url',
    'validate_url',
    'request_params',
    'client_address',
    'header',
    'get_cookie',
    'build_cookie',
    'clear_cookie',
    'request_method',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
    'log_request',
]
