from dataclasses import dataclass
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any, Self

from deepshortener.exceptions import ValidationError


class UserType(StrEnum):
    """Audience of a link. Only customers and suppliers get platform deep links."""

    CUSTOMER = 'customer'
    SUPPLIER = 'supplier'
    ORGANIZATION = 'organization'
    NONE = ''

    @classmethod
    def parse(cls, value: str | None) -> 'UserType':
        if value is None:
            return cls.NONE
        try:
            return cls(value)
        except ValueError as e:
            raise ValidationError(f'Invalid userType {value!r}.') from e

    @property
    def deep_link_scheme(self) -> str | None:
        return _DEEP_LINK_SCHEMES.get(self)


_DEEP_LINK_SCHEMES = {
    UserType.CUSTOMER: 'rydeu',
    UserType.SUPPLIER: 'rydeu-supplier',
}


# fmt: off
@dataclass(frozen=True)
class LinkModel:
    short_id: str                               # Unique short identifier, immutable once assigned
    long_url: str                               # Original absolute URL
    user_type: UserType                         # Decides whether deep links exist
    created_at: datetime                        # Creation instant (UTC)
    booking_start_time: datetime | None = None  # Drives the booking TTL branch when present
    deep_link: str | None = None                # Platform deep link (customer/supplier only)
    ios_link: str | None = None                 # iOS deep link (customer/supplier only)
# fmt: on

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the JSON record stored under both cache keys."""
        return {
            'shortId': self.short_id,
            'longURL': self.long_url,
            'userType': self.user_type.value,
            'bookingStartTime': _isoformat(self.booking_start_time),
            'deepLink': self.deep_link,
            'iosLink': self.ios_link,
            'createdAt': _isoformat(self.created_at),
        }

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> Self:
        """Rebuild a link from its stored record.

        Raises:
            TypeError: if the record is not a JSON object.
            KeyError: if a mandatory field is missing.
            ValueError: if an instant or the user type cannot be parsed.
        """
        if not isinstance(record, dict):
            raise TypeError(f'Link record must be an object (given type: {type(record).__name__}).')
        booking_start_time = record.get('bookingStartTime')
        return cls(
            short_id=record['shortId'],
            long_url=record['longURL'],
            user_type=UserType(record.get('userType') or ''),
            created_at=_parse_instant(record['createdAt']),
            booking_start_time=_parse_instant(booking_start_time) if booking_start_time else None,
            deep_link=record.get('deepLink') or None,
            ios_link=record.get('iosLink') or None,
        )


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat().replace('+00:00', 'Z') if value is not None else None


def _parse_instant(value: str) -> datetime:
    instant = datetime.fromisoformat(value)
    return instant if instant.tzinfo is not None else instant.replace(tzinfo=UTC)
