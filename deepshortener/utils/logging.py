"""Structured JSON logging for Lambdas and the sweeper worker

Call `initialize_logging()` once per process, before the first log call.
Every Lambda package does so in its `__init__.py`.

One JSON object per line; `extra={...}` fields are merged at the top level:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "deepshortener.dao.link_store",
    "service": "deepshortener:prod",
    "message": "Created new link.",
    "shortId": "V1StGXR8"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from deepshortener.constants import ENV


# Everything a bare LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'taskName'}

# Third-party loggers that drown request logs at DEBUG
_QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render LogRecords as single-line JSON, extras included"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update({key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes and enums in `extra` are rendered with str()
        return json.dumps(log, default=str)


class ServiceFilter(logging.Filter):
    """Stamp every record with the <app name>:<app env> service name"""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if self.service and not hasattr(record, 'service'):
            record.service = self.service
        return True


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    app_name = os.getenv(ENV.App.APP_NAME)
    service = f'{app_name}:{os.getenv(ENV.App.APP_ENV, "local").lower()}' if app_name else None

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'filters': {'service': {'()': ServiceFilter, 'service': service}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'filters': ['service'],
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {'level': log_level, 'handlers': ['stdout']},
        }
    )
