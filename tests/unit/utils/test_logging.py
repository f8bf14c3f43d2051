"""Unit tests for JSON logging in logging.py."""

import json
import sys
import logging
from datetime import datetime, UTC

import pytest

from deepshortener.utils.logging import JsonFormatter, ServiceFilter, initialize_logging


def make_record(msg: str, *args, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord('deepshortener.test', logging.INFO, __file__, 1, msg, args, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_standard_fields():
    record = make_record('Created %s link.', 'new')
    record.created = datetime(2025, 10, 15, 12, 0, 0, 123000, tzinfo=UTC).timestamp()

    log = json.loads(JsonFormatter().format(record))

    assert log == {
        'timestamp': '2025-10-15T12:00:00.123Z',
        'level': 'INFO',
        'logger': 'deepshortener.test',
        'message': 'Created new link.',
    }


def test_json_formatter_includes_extras():
    record = make_record('Deleting expired link.', shortId='V1StGXR8', expiresAt=datetime(2025, 11, 1, tzinfo=UTC))

    log = json.loads(JsonFormatter().format(record))

    assert log['shortId'] == 'V1StGXR8'
    assert log['expiresAt'] == '2025-11-01 00:00:00+00:00'


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record('Failed.', exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: boom' in log['exception']


@pytest.mark.parametrize('level, expected', [(None, logging.INFO), ('debug', logging.DEBUG), ('WARNING', logging.WARNING)])
def test_initialize_logging(monkeypatch, level, expected):
    if level is None:
        monkeypatch.delenv('LOG_LEVEL', raising=False)
    else:
        monkeypatch.setenv('LOG_LEVEL', level)

    initialize_logging()

    root = logging.getLogger()
    assert root.level == expected
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)


def test_service_filter_stamps_records():
    record = make_record('Redirecting.')

    assert ServiceFilter('deepshortener:prod').filter(record) is True
    assert json.loads(JsonFormatter().format(record))['service'] == 'deepshortener:prod'


def test_service_filter_keeps_explicit_service():
    record = make_record('Redirecting.', service='sweeper')

    ServiceFilter('deepshortener:prod').filter(record)

    assert record.service == 'sweeper'


def test_initialize_logging_quiets_aws_sdk(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')

    initialize_logging()

    assert logging.getLogger('botocore').level == logging.WARNING
