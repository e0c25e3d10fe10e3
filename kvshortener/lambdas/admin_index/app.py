import logging

from kvshortener.constants import ANONYMOUS, AdminPath, Cookie, Param
from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, SessionRedisDAO, UserRedisDAO, CSRFRedisDAO, RateLimitRedisDAO
from kvshortener.exceptions import ValidationError, StoreUnavailableError
from kvshortener.services import SessionManager, CSRFGuard, AdminReporter
from kvshortener.utils import load_config, AppSettings, app_prefix, base_url, get_cookie, get_short_url, clear_cookie, log_request
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_json, response_302, response_error


logger = logging.getLogger(__name__)


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Serve the admin summary

    HTTP responses:
        200: Admin summary
            user: authenticated username
            linksTotal: links issued so far (counter value)
            lastCode / lastShort: last issued link, null if none
            sessions: active session count per username
            locks: live rate-limit windows (clientKey, count, ttl)
            csrftoken: token for subsequent state-changing requests
        302: Anonymous user, redirect to the login page
        400: Malformed session cookie (the cookie is cleared)
        503: Data store unavailable
    """
    # 0- Get application's config
    settings = AppSettings.from_config(load_config('admin_index'))
    redis_config = settings.redis_config

    try:
        # 1- Identify user
        sessions = SessionManager(
            SessionRedisDAO(**redis_config, prefix=app_prefix()),
            UserRedisDAO(**redis_config, prefix=app_prefix()),
        )
        try:
            username = sessions.authenticate(get_cookie(event, Cookie.SESSION))
        except ValidationError as e:
            logger.info('Malformed session cookie. Responding with 400.')
            return response_error(e, message=str(e), cookies=[clear_cookie(Cookie.SESSION, settings.secure(base_url(event)))])
        if username == ANONYMOUS:
            return response_302(location=AdminPath.LOGIN)

        # 2- Aggregate store contents
        reporter = AdminReporter(
            ShortURLRedisDAO(**redis_config, prefix=app_prefix()),
            sessions.session_dao,
            RateLimitRedisDAO(**redis_config, prefix=app_prefix()),
        )
        report = reporter.summary()
        csrf_token = CSRFGuard(CSRFRedisDAO(**redis_config, prefix=app_prefix()), timeout=settings.csrf_timeout).issue(username)
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'reason': str(e)})
        return response_error(e)

    return response_json(
        200,
        {
            'user': username,
            'linksTotal': report.links_total,
            'lastCode': report.last_code,
            'lastShort': get_short_url(report.last_code, event, settings.site) if report.last_code else None,
            'sessions': report.sessions,
            'locks': [{'clientKey': lock.client_key, 'count': lock.count, 'ttl': lock.ttl} for lock in report.locks],
            Param.CSRF: csrf_token,
        },
    )
