"""TTL policy for links

Every cache key of a link gets its TTL from these functions, so both keys
of the same link always carry the same lifetime.

Rules (selected by the presence of booking_start_time):
    - booking branch:  expiration = booking_start_time + policy.booking_offset
    - default branch:  expiration = created_at + policy.default_ttl

Functions:
    compute_expiration(link, policy) -> datetime
        Expiration instant of a link, a pure function of its own fields.
    expiration_for(created_at, booking_start_time, policy) -> datetime
        Same rule applied to raw fields, used to validate before a link exists.
    remaining_seconds(expiration, now=None) -> int
        Raw seconds left until expiration (may be zero or negative).
    seconds_until_expiration(expiration, policy, now=None) -> int
        Seconds left until expiration, clamped to the policy floor.
    is_expired(link, policy, now=None) -> bool
        True once the link's expiration instant has passed.
    describe_ttl(link, policy) -> dict
        Human-readable TTL summary used in create responses.

Example:
    >>> link = LinkModel(short_id='aB3dE5fG', long_url='https://example.com',
    ...                  user_type=UserType.NONE, created_at=datetime(2025, 1, 1, tzinfo=UTC))
    >>> compute_expiration(link, LinkPolicy())
    datetime.datetime(2025, 9, 28, 0, 0, tzinfo=datetime.timezone.utc)
"""

import math
from datetime import datetime, timedelta, UTC
from typing import Any

from deepshortener.models import LinkModel, LinkPolicy


def compute_expiration(link: LinkModel, policy: LinkPolicy) -> datetime:
    return expiration_for(link.created_at, link.booking_start_time, policy)


def expiration_for(created_at: datetime, booking_start_time: datetime | None, policy: LinkPolicy) -> datetime:
    if booking_start_time is not None:
        return booking_start_time + policy.booking_offset
    return created_at + policy.default_ttl


def remaining_seconds(expiration: datetime, now: datetime | None = None) -> int:
    now = now or datetime.now(UTC)
    return math.floor((expiration - now).total_seconds())


def seconds_until_expiration(expiration: datetime, policy: LinkPolicy, now: datetime | None = None) -> int:
    # NOTE: the floor only protects entries that already passed creation-time
    #       validation; callers reject non-positive windows before writing.
    return max(policy.min_ttl_seconds, remaining_seconds(expiration, now))


def is_expired(link: LinkModel, policy: LinkPolicy, now: datetime | None = None) -> bool:
    now = now or datetime.now(UTC)
    return now > compute_expiration(link, policy)


def describe_ttl(link: LinkModel, policy: LinkPolicy) -> dict[str, Any]:
    if link.booking_start_time is not None:
        return {
            'description': f'{_humanize(policy.booking_offset)} after booking start',
            'calculatedFrom': 'booking start time',
        }
    return {
        'description': f'{_humanize(policy.default_ttl)} from creation',
        'calculatedFrom': 'creation time',
    }


def _humanize(duration: timedelta) -> str:
    seconds = int(duration.total_seconds())
    for unit, size in (('day', 86_400), ('hour', 3_600), ('minute', 60)):
        if seconds >= size and seconds % size == 0:
            count = seconds // size
            return f'{count} {unit}{"s" if count != 1 else ""}'
    return f'{seconds} seconds'
