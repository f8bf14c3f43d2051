"""Unit tests for LinkModel and UserType in link_model.py.

Test coverage includes:

1. UserType parsing and deep link schemes
2. Record serialization (camelCase keys, ISO 'Z' instants)
3. Record parsing (missing fields, naive instants)
4. Immutability
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, UTC

import pytest

from deepshortener.exceptions import ValidationError
from deepshortener.models import LinkModel, UserType


# -------------------------------
# 1. UserType
# -------------------------------

@pytest.mark.parametrize(
    'value, expected',
    [
        ('customer', UserType.CUSTOMER),
        ('supplier', UserType.SUPPLIER),
        ('organization', UserType.ORGANIZATION),
        ('', UserType.NONE),
        (None, UserType.NONE),
    ],
)
def test_user_type_parse(value, expected):
    assert UserType.parse(value) is expected


@pytest.mark.parametrize('value', ['admin', 'Customer', 'driver'])
def test_user_type_parse_rejects_unknown_values(value):
    with pytest.raises(ValidationError, match='Invalid userType'):
        UserType.parse(value)


@pytest.mark.parametrize(
    'user_type, scheme',
    [
        (UserType.CUSTOMER, 'rydeu'),
        (UserType.SUPPLIER, 'rydeu-supplier'),
        (UserType.ORGANIZATION, None),
        (UserType.NONE, None),
    ],
)
def test_user_type_deep_link_scheme(user_type, scheme):
    assert user_type.deep_link_scheme == scheme


# -------------------------------
# 2. Serialization
# -------------------------------

def test_to_dict(make_link):
    link = make_link(booking_start_time=datetime(2025, 11, 1, 9, 30, tzinfo=UTC))

    assert link.to_dict() == {
        'shortId': 'V1StGXR8',
        'longURL': 'https://rydeu.com/en/booking/123',
        'userType': 'customer',
        'bookingStartTime': '2025-11-01T09:30:00Z',
        'deepLink': 'rydeu://app/booking/123',
        'iosLink': 'rydeu://app/booking/123',
        'createdAt': '2025-10-01T00:00:00Z',
    }


def test_to_dict_without_optional_fields(make_link):
    link = make_link(user_type=UserType.NONE, deep_link=None, ios_link=None)
    record = link.to_dict()

    assert record['userType'] == ''
    assert record['bookingStartTime'] is None
    assert record['deepLink'] is None
    assert record['iosLink'] is None


# -------------------------------
# 3. Parsing
# -------------------------------

def test_from_dict_restores_serialized_link(make_link):
    link = make_link(booking_start_time=datetime(2025, 11, 1, 9, 30, tzinfo=UTC))
    assert LinkModel.from_dict(link.to_dict()) == link


def test_from_dict_treats_naive_instants_as_utc():
    link = LinkModel.from_dict(
        {
            'shortId': 'abc12345',
            'longURL': 'https://example.com',
            'createdAt': '2025-10-01T12:00:00',
        }
    )

    assert link.created_at == datetime(2025, 10, 1, 12, 0, tzinfo=UTC)
    assert link.user_type is UserType.NONE
    assert link.booking_start_time is None
    assert link.deep_link is None


def test_from_dict_with_missing_mandatory_field():
    with pytest.raises(KeyError):
        LinkModel.from_dict({'shortId': 'abc12345', 'createdAt': '2025-10-01T12:00:00Z'})


@pytest.mark.parametrize('record', [[1, 2], 'abc', 42, None])
def test_from_dict_rejects_non_object_records(record):
    with pytest.raises(TypeError, match='must be an object'):
        LinkModel.from_dict(record)


def test_from_dict_with_unknown_user_type():
    with pytest.raises(ValueError):
        LinkModel.from_dict(
            {
                'shortId': 'abc12345',
                'longURL': 'https://example.com',
                'userType': 'driver',
                'createdAt': '2025-10-01T12:00:00Z',
            }
        )


# -------------------------------
# 4. Immutability
# -------------------------------

def test_link_model_is_frozen(make_link):
    link = make_link()
    with pytest.raises(FrozenInstanceError):
        link.short_id = 'changed1'
