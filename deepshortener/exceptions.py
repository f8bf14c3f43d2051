class DeepShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'SERVER_ERROR'
    status = 500
    public_message = 'An internal server error occurred.'


class ValidationError(DeepShortenerError):
    """Raised when a request carries malformed or inconsistent link data."""

    error_code = 'VALIDATION_ERROR'
    status = 400
    public_message = 'Validation failed.'


class NotFoundError(DeepShortenerError):
    """Raised when a short identifier has no active link."""

    error_code = 'NOT_FOUND'
    status = 404
    public_message = 'Short link not found.'


class StoreError(DeepShortenerError):
    """Raised when the cache or durable store blocks the requested operation."""

    error_code = 'STORE_ERROR'
    status = 500
    public_message = 'A data store error occurred.'


class ServerError(DeepShortenerError):
    """Raised on unexpected failures inside the application."""

    error_code = 'SERVER_ERROR'
    status = 500


class MissingLinkDataError(ServerError):
    """Raised when a stored link lacks the data needed to redirect."""

    error_code = 'MISSING_LINK_DATA'
    public_message = 'Missing required link data.'


class ConfigurationError(DeepShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'CONFIGURATION_ERROR'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MISSING_ENVIRONMENT_VARIABLE'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BAD_CONFIGURATION'
