from kvshortener.services.allocator import Allocator
from kvshortener.services.resolver import Resolver
from kvshortener.services.rate_limiter import RateLimiter
from kvshortener.services.sessions import SessionManager
from kvshortener.services.csrf import CSRFGuard
from kvshortener.services.reporting import AdminReporter
from kvshortener.services.admin_users import create_or_update_admin, check_password, validate_username


__all__ = [
    'Allocator',
    'Resolver',
    'RateLimiter',
    'SessionManager',
    'CSRFGuard',
    'AdminReporter',
    'create_or_update_admin',
    'check_password',
    'validate_username',
]
