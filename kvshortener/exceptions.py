class KVShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:kvshortener_error'
    status_code = 500


class ValidationError(KVShortenerError):
    """Raised on malformed client input (relative URL, broken cookie, etc.)."""

    error_code = 'app:validation_error'
    status_code = 400


class UnauthorizedError(KVShortenerError):
    """Raised when a session or CSRF token is missing or invalid."""

    error_code = 'app:unauthorized_error'
    status_code = 403


class NotFoundError(KVShortenerError):
    """Raised when a short code or another resource doesn't exist."""

    error_code = 'app:not_found_error'
    status_code = 404


class RateLimitedError(KVShortenerError):
    """Raised when a client exceeds its shortening rate."""

    error_code = 'app:rate_limited_error'
    status_code = 429


class InternalError(KVShortenerError):
    """Raised when a programming invariant is violated."""

    error_code = 'app:internal_error'
    status_code = 500


class StoreUnavailableError(KVShortenerError):
    """Raised when the key-value store can't be reached or fails a command."""

    error_code = 'app:store_unavailable_error'
    status_code = 503


class ConfigurationError(KVShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
