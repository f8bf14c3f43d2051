from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Self

from deepshortener.constants import TTL, Redirect
from deepshortener.exceptions import BadConfigurationError


@dataclass(frozen=True)
class LinkPolicy:
    """Tunable TTL and redirect policy for links.

    Every duration lives here exactly once, so the two cache keys of a link
    can never be written with diverging TTLs.

    Attributes:
        booking_offset (timedelta):
            Link lifetime after its booking start time.
        default_ttl (timedelta):
            Link lifetime after creation when no booking start time is given.
        min_ttl_seconds (int):
            Floor applied to every cache TTL.
        fallback_delay_ms (int):
            Smart banner delay before navigating to the web URL.

    Example:
        >>> policy = LinkPolicy.from_config({'booking_offset_seconds': 86400})
        >>> policy.booking_offset
        datetime.timedelta(days=1)
    """

    booking_offset: timedelta = timedelta(seconds=TTL.BOOKING_OFFSET)
    default_ttl: timedelta = timedelta(seconds=TTL.DEFAULT)
    min_ttl_seconds: int = TTL.FLOOR
    fallback_delay_ms: int = Redirect.FALLBACK_DELAY_MS

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> Self:
        """Build a policy from the 'policy' section of the app configuration.

        Missing keys fall back to the defaults in deepshortener.constants.

        Raises:
            BadConfigurationError: if a value is not a positive integer.
        """
        config = config or {}
        values = {
            'booking_offset_seconds': config.get('booking_offset_seconds', TTL.BOOKING_OFFSET),
            'default_ttl_seconds': config.get('default_ttl_seconds', TTL.DEFAULT),
            'min_ttl_seconds': config.get('min_ttl_seconds', TTL.FLOOR),
            'fallback_delay_ms': config.get('fallback_delay_ms', Redirect.FALLBACK_DELAY_MS),
        }
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise BadConfigurationError(f'Link policy value {name!r} must be a positive integer (given value: {value!r}).')

        return cls(
            booking_offset=timedelta(seconds=values['booking_offset_seconds']),
            default_ttl=timedelta(seconds=values['default_ttl_seconds']),
            min_ttl_seconds=values['min_ttl_seconds'],
            fallback_delay_ms=values['fallback_delay_ms'],
        )
