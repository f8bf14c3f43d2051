"""Per-Lambda configuration pulled from AWS AppConfig

All Lambdas share one AppConfig application (`APP_NAME`) with one
environment per `APP_ENV`. The hosted JSON document looks like:

    {
        "build": 12,
        "active_backend": "redis",
        "policy": {
            "booking_offset_seconds": 2592000,
            "default_ttl_seconds": 23328000,
            "min_ttl_seconds": 3600,
            "fallback_delay_ms": 1500
        },
        "configs": {
            "create_link": {
                "redis": { ... },
                "dynamodb": {"table_name": "deepshortener-links"}
            },
            "redirect_link": {"redis": { ... }},
            "sweep_expired_links": {"redis": { ... }}
        }
    }

`load_config(name)` flattens that into what one Lambda needs: its cache
section keyed by the active backend, an optional `dynamodb` section that
switches on the durable store, and the shared `policy`.

    >>> load_config('redirect_link')
    {'redis': {'host': 'redis.internal', 'port': 6379, 'db': 0}, 'policy': {...}}

Under `sam local` the document comes from an AppConfig Agent container
instead (`APPCONFIG_AGENT_URL`, loopback or docker hosts only).
"""

import os
import json
import urllib.parse
import urllib.request
import logging
from typing import Any

import boto3

from deepshortener.types import LambdaConfiguration
from deepshortener.constants import ENV
from deepshortener.exceptions import BadConfigurationError
from deepshortener.utils.helpers import require_environment
from deepshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
LOCAL_AGENT_PORT = 2772
DEFAULT_PROFILE_NAME = 'backend-config'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Cache key namespace <app name>:<app env>; None without APP_NAME"""
    name = app_name()
    return f'{name}:{app_env()}' if name is not None else None


def extract_lambda_config(document: dict[str, Any], lambda_name: str) -> LambdaConfiguration:
    """Flatten a full AppConfig document into one Lambda's configuration

    Raises:
        BadConfigurationError: when the active backend or the Lambda's section is missing.
    """
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
        lambda_config = {backend: section[backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no usable section for '{lambda_name}'.") from e

    if 'dynamodb' in section:
        lambda_config['dynamodb'] = section['dynamodb']
    lambda_config['policy'] = document.get('policy') or {}
    return lambda_config


def local_agent_url() -> str | None:
    """APPCONFIG_AGENT_URL when it points at a local AppConfig Agent, None when unset

    Raises:
        BadConfigurationError: for any other scheme, host or port.
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url:
        return None

    parts = urllib.parse.urlparse(url)
    if parts.scheme not in ('http', 'https'):
        raise BadConfigurationError(f'AppConfig agent URL must use http(s): {url}')
    if parts.hostname not in LOCAL_AGENT_HOSTS:
        raise BadConfigurationError(f'AppConfig agent URL must point to a local host: {url}')
    if parts.port not in (LOCAL_AGENT_PORT, None):
        raise BadConfigurationError(f'AppConfig agent URL must use port {LOCAL_AGENT_PORT}: {url}')
    return url.rstrip('/')


def _agent_document(agent_url: str) -> dict[str, Any]:  # pragma: no cover
    profile = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile}'
    logger.debug('Fetching AppConfig from local agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
        return json.load(r)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _appconfig_document() -> dict[str, Any]:
    appconfig = boto3.client('appconfigdata')
    token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']
    response = appconfig.get_latest_configuration(ConfigurationToken=token)
    return json.loads(response['Configuration'].read().decode('utf-8'))


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load one Lambda's configuration ('create_link', 'redirect_link', 'sweep_expired_links')

    Raises:
        MissingEnvironmentVariableError: when AppConfig identifiers are not set.
        BadConfigurationError: when the document lacks the Lambda's section.
        botocore.exceptions.ClientError: when AppConfig rejects the request.
    """
    agent_url = local_agent_url() if running_locally() else None
    if agent_url:
        source, document = 'agent', _agent_document(agent_url)
    else:
        source, document = 'appconfig', _appconfig_document()

    lambda_config = extract_lambda_config(document, lambda_name)
    logger.debug('Loaded Lambda configuration.', extra={'lambdaName': lambda_name, 'source': source, 'build': document.get('build')})
    return lambda_config
