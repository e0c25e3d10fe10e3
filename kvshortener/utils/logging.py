"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file,
so logging is configured before the handler logs anything.

Logging format:
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "kvshortener.utils.logging",
    "message": "Handled request.",
    "method": "GET",
    "path": "/abc",
    "statusCode": 302,
    "elapsedMs": 3.14
}
"""

import os
import json
import time
import logging
import logging.config
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.constants import ENV


logger = logging.getLogger(__name__)


# Attributes every LogRecord carries; anything else was passed through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', None, None))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, exception and `extra` fields"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        payload = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)
        return json.dumps(payload, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )


def log_request(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: log method, path, status code and elapsed time of every request

    Stack it above guarantee_500_response so generic 500 responses are logged too.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        start = time.perf_counter()
        status_code = 500
        try:
            response = handler(event, context)
            status_code = response.get('statusCode', 500)
            return response
        finally:
            logger.info(
                'Handled request.',
                extra={
                    'method': event.get('httpMethod') or event.get('requestContext', {}).get('http', {}).get('method'),
                    'path': event.get('path') or event.get('rawPath'),
                    'statusCode': status_code,
                    'elapsedMs': round((time.perf_counter() - start) * 1000, 3),
                },
            )

    return wrapper
