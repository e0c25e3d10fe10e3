import sys
import json
import logging

import pytest

from kvshortener.utils import logging as app_logging
from kvshortener.utils.logging import JsonFormatter, log_request


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord('kvshortener.test', logging.INFO, __file__, 1, 'Hello %s.', ('world',), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter():
    log = json.loads(JsonFormatter().format(_record(code='1', linkId=1)))

    assert log['level'] == 'INFO'
    assert log['logger'] == 'kvshortener.test'
    assert log['message'] == 'Hello world.'
    assert log['code'] == '1'
    assert log['linkId'] == 1
    assert log['timestamp'].endswith('Z')
    assert 'args' not in log


def test_json_formatter_with_exception():
    try:
        raise ValueError('boom')
    except ValueError:
        record = logging.LogRecord('kvshortener.test', logging.ERROR, __file__, 1, 'Failed.', None, sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'ValueError: boom' in log['exception']


def test_log_request(caplog):
    @log_request
    def handler(event, context):
        return {'statusCode': 302}

    with caplog.at_level(logging.INFO, logger=app_logging.__name__):
        response = handler({'httpMethod': 'GET', 'path': '/abc'}, None)

    assert response == {'statusCode': 302}
    record = next(r for r in caplog.records if r.getMessage() == 'Handled request.')
    assert record.method == 'GET'
    assert record.path == '/abc'
    assert record.statusCode == 302
    assert record.elapsedMs >= 0


def test_log_request_when_handler_raises(caplog):
    @log_request
    def handler(event, context):
        raise RuntimeError('boom')

    with caplog.at_level(logging.INFO, logger=app_logging.__name__):
        with pytest.raises(RuntimeError):
            handler({'requestContext': {'http': {'method': 'POST'}}, 'rawPath': '/'}, None)

    record = next(r for r in caplog.records if r.getMessage() == 'Handled request.')
    assert record.method == 'POST'
    assert record.statusCode == 500


def test_initialize_logging(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        app_logging.initialize_logging()
        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
