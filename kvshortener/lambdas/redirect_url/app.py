import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO
from kvshortener.exceptions import NotFoundError, StoreUnavailableError
from kvshortener.services import Resolver
from kvshortener.utils import load_config, AppSettings, app_prefix, is_valid_code, log_request
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_302, response_error


logger = logging.getLogger(__name__)


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract the short code from the request path
    - Step 2: Look up the target URL (malformed codes are never looked up)
    - Step 3: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        404: Unknown or malformed short code
        503: Data store unavailable
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'code': '1'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/a'
    """
    # 0- Get application's config
    settings = AppSettings.from_config(load_config('redirect_url'))

    # 1- Extract short code from request's path
    code = (event.get('pathParameters') or {}).get('code')
    if not code or not is_valid_code(code):
        logger.info('Malformed short code in path. Responding with 404.', extra={'code': code})
        return response_error(NotFoundError())

    # 2- Look up target URL
    try:
        resolver = Resolver(ShortURLRedisDAO(**settings.redis_config, prefix=app_prefix()))
        target_url = resolver.resolve(code)
    except NotFoundError as e:
        logger.info('Short code not found. Responding with 404.', extra={'code': code})
        return response_error(e)
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'code': code, 'reason': str(e)})
        return response_error(e)

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 302.', extra={'code': code})
    return response_302(location=target_url)
