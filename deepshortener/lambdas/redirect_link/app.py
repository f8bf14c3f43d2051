import logging

from deepshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from deepshortener.exceptions import ConfigurationError, MissingLinkDataError, NotFoundError, StoreError, ValidationError
from deepshortener.dao.link_store import LinkStore
from deepshortener.models import RedirectKind
from deepshortener.utils import load_config, app_prefix, guarantee_500_response
from deepshortener.utils.redirect import resolve_redirect
from deepshortener.utils.responses import response_302, response_html, response_error
from deepshortener.lambdas.redirect_link.constants import (
    MISSING_SHORT_ID,
    LINK_NOT_FOUND,
    LINK_LOOKUP_FAILURE,
    MISSING_LINK_DATA,
    CONFIGURATION_FAILURE,
    REDIRECT_SUCCESS,
    SMART_BANNER_SERVED,
)


logger = logging.getLogger(__name__)


def user_agent(event: LambdaEvent) -> str | None:
    # API Gateway keeps header casing as sent by the client
    headers = event.get('headers') or {}
    for name, value in headers.items():
        if name.lower() == 'user-agent':
            return value
    return None


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to follow short links

    Procedure:
    - Step 1: Extract the short id from the request path
    - Step 2: Look up the active link (expired links are removed on the way)
    - Step 3: Classify the User-Agent and pick a redirect strategy
    - Step 4: Answer with a 302 or a smart banner page

    HTTP responses:
        302: Redirect to the long URL (desktop, no deep link) or to the deep
             link (in-app browser)
        200: text/html smart banner for mobile browsers
        400: missing short id in path (VALIDATION_ERROR)
        404: no active link for this short id (NOT_FOUND)
        500: store failure or link without a long URL

    Example:
        >>> event = {'pathParameters': {'shortId': 'V1StGXR8'}, 'headers': {'User-Agent': 'Mozilla/5.0 (X11; Linux x86_64)'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode'], response['headers']['Location']
        (302, 'https://rydeu.com/en/booking/123')
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_link')
    except ConfigurationError as error:
        logger.exception('Failed to load configuration for redirect function. Responding with 500.', extra={'event': CONFIGURATION_FAILURE})
        return response_error(error)

    # 1- Extract short id from request's path
    short_id = (event.get('pathParameters') or {}).get('shortId')
    if not short_id:
        logger.info('Missing "shortId" in path. Responding with 400.', extra={'event': MISSING_SHORT_ID})
        return response_error(ValidationError("Bad Request (missing 'shortId' in path)"))

    # 2- Look up the link
    try:
        with LinkStore.from_config(app_config, prefix=app_prefix()) as store:
            link = store.find_by_short_id(short_id)
            policy = store.policy
    except (StoreError, ConfigurationError) as error:
        logger.exception('Failed to look up link. Responding with 500.', extra={'shortId': short_id, 'event': LINK_LOOKUP_FAILURE})
        return response_error(error)

    if link is None:
        logger.info('Link not found or expired. Responding with 404.', extra={'shortId': short_id, 'event': LINK_NOT_FOUND})
        return response_error(NotFoundError())

    # 3- Decide how to send the client on
    try:
        decision = resolve_redirect(link, user_agent(event), policy)
    except MissingLinkDataError as error:
        logger.error('Link has no long URL. Responding with 500.', extra={'shortId': short_id, 'event': MISSING_LINK_DATA})
        return response_error(error)

    # 4- Respond
    if decision.kind == RedirectKind.SMART_BANNER:
        logger.info('Serving smart banner.', extra={'shortId': short_id, 'appURL': decision.location, 'event': SMART_BANNER_SERVED})
        return response_html(decision.body)

    logger.info('Redirecting client. Responding with 302.', extra={'shortId': short_id, 'location': decision.location, 'event': REDIRECT_SUCCESS})
    return response_302(location=decision.location)
