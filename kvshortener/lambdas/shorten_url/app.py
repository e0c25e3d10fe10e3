import logging

from kvshortener.constants import Param
from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, RateLimitRedisDAO
from kvshortener.exceptions import ValidationError, RateLimitedError, StoreUnavailableError
from kvshortener.services import Allocator, RateLimiter
from kvshortener.utils import load_config, AppSettings, app_prefix, get_short_url, request_params, client_address, header, log_request, validate_url
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_json, response_error


logger = logging.getLogger(__name__)


@log_request
@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract and validate the target URL from the query string, form or JSON body
    - Step 2: Identify the client (only when rate limiting is active)
    - Step 3: Allocate the short link (validate, rate check, increment, persist)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            url: original url (provided in request)
            short: newly generated short url
        400: Bad client request
            message: indicate cause of bad request (missing, relative or malformed url)
        429: Too many shortening requests
        503: Data store unavailable
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'httpMethod': 'POST', 'body': 'url=https%3A%2F%2Fexample.com%2Fa'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])
        {'url': 'https://example.com/a', 'short': 'https://sho.rt/1'}
    """
    # 0- Get application's config
    settings = AppSettings.from_config(load_config('shorten_url'))

    try:
        # 1- Extract and validate target URL before touching the data store
        target_url = validate_url(request_params(event).get(Param.URL))

        # 2- Identify client for rate limiting
        short_url_dao = ShortURLRedisDAO(**settings.redis_config, prefix=app_prefix())
        rate_limiter, client_key = None, None
        if settings.rate.active:
            rate_limiter = RateLimiter(
                RateLimitRedisDAO(**settings.redis_config, prefix=app_prefix()),
                limit=settings.rate.count,
                window_seconds=settings.rate.interval,
                check_user_agent=settings.rate.check_user_agent,
            )
            client_key = rate_limiter.client_key(client_address(event), header(event, 'User-Agent'))

        # 3- Allocate short link
        link = Allocator(short_url_dao, rate_limiter=rate_limiter).shorten(target_url, client_key=client_key)
    except ValidationError as e:
        logger.info('Invalid shortening request. Responding with 400.', extra={'reason': str(e)})
        return response_error(e, message=str(e))
    except RateLimitedError as e:
        logger.info('Shortening rate exceeded. Responding with 429.', extra={'clientKey': client_key})
        return response_error(e)
    except StoreUnavailableError as e:
        logger.error('Data store unavailable. Responding with 503.', extra={'reason': str(e)})
        return response_error(e)

    # 4- Return successful response to user
    short_url = get_short_url(link.code, event, settings.site)
    logger.info('Shortened URL. Responding with 200.', extra={'code': link.code, 'linkId': link.link_id})
    return response_json(200, {'url': link.target, 'short': short_url})
