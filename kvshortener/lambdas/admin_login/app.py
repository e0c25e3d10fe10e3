import logging

from kvshortener.constants import ANONYMOUS, AdminPath, Cookie, Param
from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import SessionRedisDAO, UserRedisDAO, CSRFRedisDAO
from kvshortener.exceptions import ValidationError, UnauthorizedError, StoreUnavailableError
from kvshortener.services import SessionManager, CSRFGuard
from kvshortener.utils import (
    load_config,
    AppSettings,
    app_prefix,
    base_url,
    get_cookie,
    build_cookie,
    clear_cookie,
    request_method,
    request_params,
    log_request,
)
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_json, response_302, response_error


logger = logging.getLogger(__name__)


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle admin login requests

    This Lambda handler follows this procedure:
    - Step 1: Identify the user from the session cookie
    - Step 2: GET: hand out the anonymous user's CSRF token for the login form
    - Step 3: POST: verify the CSRF token
    - Step 4: POST: verify credentials and open a session

    HTTP responses:
        200: Login form data
            csrftoken: token to submit along with the credentials
        302: Logged in (or already authenticated), redirect to the admin index
            Set-Cookie: session=<user>::<token>; HttpOnly; Path=/ (Secure over https)
        400: Malformed session cookie (the cookie is cleared)
        403: Invalid CSRF token, unknown user or wrong password
        503: Data store unavailable
    """
    # 0- Get application's config
    settings = AppSettings.from_config(load_config('admin_login'))
    secure = settings.secure(base_url(event))

    try:
        sessions = SessionManager(
            SessionRedisDAO(**settings.redis_config, prefix=app_prefix()),
            UserRedisDAO(**settings.redis_config, prefix=app_prefix()),
        )
        csrf = CSRFGuard(CSRFRedisDAO(**settings.redis_config, prefix=app_prefix()), timeout=settings.csrf_timeout)

        # 1- Identify user
        try:
            username = sessions.authenticate(get_cookie(event, Cookie.SESSION))
        except ValidationError as e:
            logger.info('Malformed session cookie. Responding with 400.')
            return response_error(e, message=str(e), cookies=[clear_cookie(Cookie.SESSION, secure)])
        if username != ANONYMOUS:
            logger.debug('User is already authenticated. Responding with 302.', extra={'username': username})
            return response_302(location=AdminPath.INDEX)

        # 2- Hand out login form data
        if request_method(event) != 'POST':
            return response_json(200, {Param.CSRF: csrf.issue(ANONYMOUS)})

        # 3- Verify CSRF token
        params = request_params(event)
        if not csrf.verify(ANONYMOUS, params.get(Param.CSRF)):
            logger.info('Invalid CSRF token on login. Responding with 403.')
            return response_error(UnauthorizedError(), message='invalid csrf token')

        # 4- Verify credentials
        session = sessions.login(params.get(Param.USER, ''), params.get(Param.PASSWORD))
    except ValidationError as e:
        logger.info('Invalid login request. Responding with 400.', extra={'reason': str(e)})
        return response_error(e, message=str(e))
    except UnauthorizedError as e:
        return response_error(e, message='mismatch user or password')
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'reason': str(e)})
        return response_error(e)

    cookie = build_cookie(Cookie.SESSION, session.cookie_value, secure)
    return response_302(location=AdminPath.INDEX, cookies=[cookie])
