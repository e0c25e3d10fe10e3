from enum import StrEnum


class Defaults:
    """Default values used when configuration omits them."""

    RATE_LIMIT_COUNT = 10  # Shortening requests per client and window
    RATE_LIMIT_INTERVAL = 60  # Rate limit window (seconds)
    CSRF_TIMEOUT = 3_600  # CSRF token lifetime (1 hour in seconds)
    REDIS_MAX_CONNECTIONS = 16  # Connection pool capacity
    REDIS_TIMEOUT = 5  # Pool borrow & socket timeout (seconds)


class TokenSize:
    """Random byte lengths of generated secrets."""

    SESSION = 128  # Session token
    CSRF = 128  # CSRF token
    PASSWORD = 12  # Admin user password


class Cookie(StrEnum):
    SESSION = 'session'


class Param(StrEnum):
    """Request parameter names (query string, form or JSON body)."""

    URL = 'url'
    USER = 'user'
    PASSWORD = 'password'
    CSRF = 'csrftoken'


class AdminPath(StrEnum):
    LOGIN = '/admin/login/'
    INDEX = '/admin/index/'


# Fake username of unauthenticated clients
ANONYMOUS = 'anonymous'

# Separator between username and token in the session cookie
SESSION_SEPARATOR = '::'

# Header of the exported links CSV
EXPORT_CSV_HEADER = ('short', 'origin')


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'KVSHORTENER_CONFIG_FILE'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
