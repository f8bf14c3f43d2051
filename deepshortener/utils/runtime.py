import os

from deepshortener.constants import ENV


def running_locally() -> bool:
    """True under `sam local` (AWS_SAM_LOCAL=true) or with APP_ENV=local

    Local runs re-raise handler crashes and may read AppConfig from a local agent.
    """
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'
