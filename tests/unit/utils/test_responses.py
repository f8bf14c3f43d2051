"""Unit tests for API Gateway response builders in responses.py."""

import json

import pytest

from deepshortener.exceptions import (
    DeepShortenerError,
    ValidationError,
    NotFoundError,
    StoreError,
    MissingLinkDataError,
    BadConfigurationError,
)
from deepshortener.dao.exceptions import DataStoreError
from deepshortener.utils.responses import response_200, response_302, response_html, response_error


def test_response_200():
    response = response_200({'shortURL': 'https://go.rydeu.com/V1StGXR8'})

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'] == 'application/json'
    assert response['headers']['Access-Control-Allow-Origin'] == '*'
    assert json.loads(response['body']) == {'shortURL': 'https://go.rydeu.com/V1StGXR8'}


def test_response_302():
    response = response_302(location='rydeu://app/booking/123')

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'rydeu://app/booking/123'


def test_response_html():
    response = response_html('<html></html>')

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'].startswith('text/html')
    assert response['body'] == '<html></html>'


@pytest.mark.parametrize(
    'error, status, message, error_code',
    [
        (ValidationError('Invalid userType \'driver\'.'), 400, "Invalid userType 'driver'.", 'VALIDATION_ERROR'),
        (ValidationError(), 400, 'Validation failed.', 'VALIDATION_ERROR'),
        (NotFoundError(), 404, 'Short link not found.', 'NOT_FOUND'),
        (StoreError('redis exploded at 10.0.0.1'), 500, 'A data store error occurred.', 'STORE_ERROR'),
        (DataStoreError("Can't connect to Redis at redis.test:6379/0."), 500, 'A data store error occurred.', 'STORE_ERROR'),
        (MissingLinkDataError('no long URL'), 500, 'Missing required link data.', 'MISSING_LINK_DATA'),
        (BadConfigurationError('bad policy'), 500, 'An internal server error occurred.', 'BAD_CONFIGURATION'),
    ],
)
def test_response_error(error: DeepShortenerError, status: int, message: str, error_code: str):
    response = response_error(error)

    assert response['statusCode'] == status
    assert json.loads(response['body']) == {'message': message, 'errorCode': error_code}
