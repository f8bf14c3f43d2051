from deepshortener.utils.config import app_env, app_name, app_prefix, load_config
from deepshortener.utils.helpers import base_url, get_short_url, parse_instant, require_environment, guarantee_500_response
from deepshortener.utils.shortener import generate_short_id
from deepshortener.utils.logging import initialize_logging


__all__ = [
    'generate_short_id',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'parse_instant',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
