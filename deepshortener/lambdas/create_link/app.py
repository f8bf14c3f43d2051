import json
import logging

from deepshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from deepshortener.exceptions import ConfigurationError, StoreError, ValidationError
from deepshortener.dao.link_store import LinkStore
from deepshortener.models import LinkModel, LinkPolicy
from deepshortener.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from deepshortener.utils.responses import response_200, response_error
from deepshortener.utils.ttl import compute_expiration, describe_ttl, seconds_until_expiration
from deepshortener.lambdas.create_link.constants import (
    INVALID_REQUEST_BODY,
    LINK_VALIDATION_FAILED,
    LINK_STORE_FAILURE,
    CONFIGURATION_FAILURE,
    LINK_CREATED,
)


logger = logging.getLogger(__name__)


def link_body(link: LinkModel, policy: LinkPolicy, event: LambdaEvent) -> dict:
    expiration = compute_expiration(link, policy)
    return {
        'shortURL': get_short_url(link.short_id, event),
        'deepLink': link.deep_link,
        'iosLink': link.ios_link,
        'bookingStartTime': link.to_dict()['bookingStartTime'],
        'expiresAt': expiration.isoformat().replace('+00:00', 'Z'),
        'ttl': {
            'seconds': seconds_until_expiration(expiration, policy),
            **describe_ttl(link, policy),
        },
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests that create short deep links

    Procedure:
    - Step 1: Load this Lambda's configuration
    - Step 2: Parse longURL, userType and bookingStartTime from the JSON body
    - Step 3: Create the link, or reuse the active one for the same long URL
    - Step 4: Respond with the short URL, deep links and TTL summary

    HTTP responses:
        200: Link created (or reused)
            shortURL, deepLink, iosLink, bookingStartTime, expiresAt,
            ttl: {seconds, description, calculatedFrom}
        400: Bad client request (VALIDATION_ERROR)
            message: invalid JSON, missing URL, bad userType or booking time
        500: Internal server error
            errorCode: STORE_ERROR, CONFIGURATION_ERROR, ...

    Example:
        >>> event = {'body': '{"longURL": "https://rydeu.com/en/booking/123", "userType": "customer"}'}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['deepLink']
        'rydeu://app/booking/123'
    """
    # 1- Load configuration
    try:
        app_config = load_config('create_link')
    except ConfigurationError as error:
        logger.exception('Failed to load configuration.', extra={'event': CONFIGURATION_FAILURE})
        return response_error(error)

    # 2- Parse request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body.', extra={'event': INVALID_REQUEST_BODY})
        return response_error(ValidationError('Bad Request (invalid JSON body)'))
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object.', extra={'event': INVALID_REQUEST_BODY})
        return response_error(ValidationError('Bad Request (JSON body must be an object)'))

    # 3- Create or reuse the link
    try:
        with LinkStore.from_config(app_config, prefix=app_prefix()) as store:
            link = store.create(
                request_body.get('longURL'),
                user_type=request_body.get('userType'),
                booking_start_time=request_body.get('bookingStartTime'),
            )
            policy = store.policy
    except ValidationError as error:
        logger.info('Link validation failed: %s', error, extra={'event': LINK_VALIDATION_FAILED})
        return response_error(error)
    except (StoreError, ConfigurationError) as error:
        logger.exception('Failed to create link.', extra={'event': LINK_STORE_FAILURE})
        return response_error(error)

    # 4- Respond with the link
    body = link_body(link, policy, event)
    logger.info('Link ready.', extra={'event': LINK_CREATED, 'shortId': link.short_id, 'shortURL': body['shortURL']})
    return response_200(body)
