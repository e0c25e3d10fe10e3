import logging

from kvshortener.constants import ANONYMOUS, AdminPath, Cookie
from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, SessionRedisDAO, UserRedisDAO, RateLimitRedisDAO
from kvshortener.exceptions import ValidationError, StoreUnavailableError
from kvshortener.services import SessionManager, AdminReporter
from kvshortener.utils import load_config, AppSettings, app_prefix, base_url, get_cookie, clear_cookie, log_request
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_302, response_csv, response_error


logger = logging.getLogger(__name__)

EXPORT_FILENAME = 'links.csv'


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Export every short link as a CSV attachment (header: short,origin), ordered by link id

    HTTP responses:
        200: text/csv attachment
        302: Anonymous user, redirect to the login page
        400: Malformed session cookie (the cookie is cleared)
        503: Data store unavailable
    """
    # 0- Get application's config
    settings = AppSettings.from_config(load_config('admin_export'))
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

        # 2- Export links
        reporter = AdminReporter(
            ShortURLRedisDAO(**redis_config, prefix=app_prefix()),
            sessions.session_dao,
            RateLimitRedisDAO(**redis_config, prefix=app_prefix()),
        )
        content = reporter.export_csv()
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'reason': str(e)})
        return response_error(e)

    logger.info('Exported short links. Responding with 200.', extra={'username': username})
    return response_csv(content, EXPORT_FILENAME)
