import logging

from kvshortener.constants import ANONYMOUS, AdminPath, Cookie, Param
from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import SessionRedisDAO, UserRedisDAO, CSRFRedisDAO
from kvshortener.exceptions import ValidationError, UnauthorizedError, StoreUnavailableError
from kvshortener.services import SessionManager, CSRFGuard
from kvshortener.utils import load_config, AppSettings, app_prefix, base_url, get_cookie, clear_cookie, request_method, request_params, log_request
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_json, response_302, response_error


logger = logging.getLogger(__name__)


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle admin logout requests

    Only the session of the requesting browser is revoked; other sessions of
    the same user stay valid.

    HTTP responses:
        302: Logged out (or anonymous), redirect to the login page, session cookie cleared
        400: Malformed session cookie (the cookie is cleared)
        403: Invalid CSRF token
        405: Method other than POST
        503: Data store unavailable
    """
    if request_method(event) != 'POST':
        return response_json(405, {'message': 'Method Not Allowed'}, headers={'Allow': 'POST'})

    # 0- Get application's config
    settings = AppSettings.from_config(load_config('admin_logout'))
    secure = settings.secure(base_url(event))
    expired_cookie = clear_cookie(Cookie.SESSION, secure)

    try:
        sessions = SessionManager(
            SessionRedisDAO(**settings.redis_config, prefix=app_prefix()),
            UserRedisDAO(**settings.redis_config, prefix=app_prefix()),
        )
        csrf = CSRFGuard(CSRFRedisDAO(**settings.redis_config, prefix=app_prefix()), timeout=settings.csrf_timeout)

        # 1- Identify user
        cookie_value = get_cookie(event, Cookie.SESSION)
        username = sessions.authenticate(cookie_value)
        if username == ANONYMOUS:
            return response_302(location=AdminPath.LOGIN, cookies=[expired_cookie])

        # 2- Verify CSRF token
        if not csrf.verify(username, request_params(event).get(Param.CSRF)):
            logger.info('Invalid CSRF token on logout. Responding with 403.', extra={'username': username})
            return response_error(UnauthorizedError(), message='invalid csrf token')

        # 3- Revoke session
        sessions.logout(cookie_value)
    except ValidationError as e:
        logger.info('Invalid logout request. Responding with 400.', extra={'reason': str(e)})
        return response_error(e, message=str(e), cookies=[expired_cookie])
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'reason': str(e)})
        return response_error(e)

    return response_302(location=AdminPath.LOGIN, cookies=[expired_cookie])
