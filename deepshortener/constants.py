from enum import StrEnum


class TTL:
    """TTL policy defaults in seconds."""

    # Link lifetime after the booking start time (30 days)
    BOOKING_OFFSET = 2_592_000  # 60 * 60 * 24 * 30
    # Link lifetime after creation when no booking is attached (nine 30-day months)
    DEFAULT = 23_328_000  # 60 * 60 * 24 * 30 * 9
    # Lowest TTL ever written to the cache (1 hour)
    FLOOR = 3_600


class Redirect:
    """Redirect resolution defaults."""

    FALLBACK_DELAY_MS = 1_500  # Smart banner wait before falling back to the web URL


class ShortId:
    """Short identifier generation defaults."""

    LENGTH = 8
    MAX_ATTEMPTS = 5  # Bounded retry on identifier collision


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        BASE_URL = 'BASE_URL'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
