import json
import logging

from deepshortener.types import LambdaEvent, LambdaContext, LambdaDiagnosticResponse
from deepshortener.exceptions import ConfigurationError, StoreError
from deepshortener.dao.link_store import LinkStore
from deepshortener.tasks.expiration_sweeper import ExpirationSweeper, SweepReport
from deepshortener.utils import load_config, app_prefix
from deepshortener.lambdas.sweep_expired_links.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, report: SweepReport) -> LambdaDiagnosticResponse:
    return json.dumps(
        {
            'status': SUCCESS,
            'checked': report.checked,
            'deleted': report.deleted,
            'failed': report.failed,
            'message': f'Swept expired links: {report.deleted} deleted out of {report.checked} checked',
        }
    )


def response_error(*, error: Exception) -> LambdaDiagnosticResponse:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to sweep expired links',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaDiagnosticResponse:
    """Run one expiration sweep (EventBridge schedule, every 6 hours).

    Diagnostic responses (NOT valid HTTP responses):
        `success`:
            status: success
            checked / deleted / failed: sweep counters
            message: Swept expired links: <deleted> deleted out of <checked> checked
        `error`:
            status: error
            message: Failed to sweep expired links
            reason: <reason>
            error: <error class name> (e.g. DataStoreError, BadConfigurationError)
    """
    try:
        app_config = load_config('sweep_expired_links')
        with LinkStore.from_config(app_config, prefix=app_prefix()) as store:
            report = ExpirationSweeper(store).sweep()
    except (StoreError, ConfigurationError) as error:
        logger.exception(
            'Failed to sweep expired links.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Swept expired links.',
            extra={'event': SUCCESS, 'checked': report.checked, 'deleted': report.deleted, 'failed': report.failed},
        )
        return response_success(report=report)
