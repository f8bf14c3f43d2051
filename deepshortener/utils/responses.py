"""API Gateway (Lambda proxy) response builders

Error bodies always carry a stable machine-readable code:

    {"message": "...", "errorCode": "VALIDATION_ERROR"}

Backend error text never reaches the body; it is logged by the caller.
"""

import json
from typing import Any

from deepshortener.exceptions import DeepShortenerError, ValidationError
from deepshortener.types import LambdaResponse


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_200(body: dict[str, Any]) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': '',
    }


def response_html(html: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/html; charset=utf-8', 'Cache-Control': 'no-store'},
        'body': html,
    }


def response_error(error: DeepShortenerError) -> LambdaResponse:
    """Map an application error to its status code and public message

    Validation messages describe the caller's own input and are returned
    as-is. Every other error answers with its class-level public message.
    """
    message = str(error) if isinstance(error, ValidationError) and str(error) else error.public_message
    return {
        'statusCode': error.status,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(
            {
                'message': message,
                'errorCode': error.error_code,
            }
        ),
    }
