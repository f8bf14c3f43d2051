"""Request helpers shared by the API Lambdas

Short URLs are built from the API Gateway event unless BASE_URL pins the
public host:

    >>> get_short_url('V1StGXR8', {'requestContext': {'domainName': 'go.rydeu.com', 'stage': 'Prod'}})
    'https://go.rydeu.com/V1StGXR8'
    >>> get_short_url('V1StGXR8', {})
    'http://localhost:3000/V1StGXR8'
"""

import os
import json
import functools
import logging
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from deepshortener.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from deepshortener.exceptions import MissingEnvironmentVariableError, ValidationError
from deepshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_BASE_URL = 'http://localhost:3000'


def base_url(event: dict[str, Any]) -> str:
    """Public origin short links are served from

    BASE_URL wins when set. Custom API Gateway domains map to their root;
    default execute-api domains keep the stage path. Events without a
    request context (SAM CLI, tests) fall back to LOCAL_BASE_URL.
    """
    configured = os.environ.get(ENV.App.BASE_URL)
    if configured:
        return configured.rstrip('/')

    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL
    if 'execute-api' in domain:
        return f"https://{domain}/{request_context.get('stage', '')}"
    return f'https://{domain}'


def get_short_url(short_id: str, event: dict[str, Any]) -> str:
    return f'{base_url(event).rstrip("/")}/{short_id}'


def parse_instant(value: Any) -> datetime:
    """Parse an ISO-8601 instant into an aware UTC datetime

    Naive values are interpreted as UTC.

    Raises:
        ValidationError: if the value is not a string or not a real instant.

    Example:
        >>> parse_instant('2025-10-15T10:00:00Z')
        datetime.datetime(2025, 10, 15, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, str) and value.strip():
        try:
            instant = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f'Invalid booking start time format: {value!r}.') from e
    else:
        raise ValidationError(f'Invalid booking start time format: {value!r}.')

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    try:
        return instant.astimezone(UTC)
    except OverflowError as e:
        raise ValidationError(f'Booking start time out of range: {value!r}.') from e


def require_environment(*names: str) -> Callable:
    """Fail with MissingEnvironmentVariableError unless every named variable is set and non-empty"""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: answer with a JSON 500 instead of crashing the Lambda

    When running locally, the original exception is re-raised to keep
    tracebacks visible during development.
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Lambda handler crashed. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
