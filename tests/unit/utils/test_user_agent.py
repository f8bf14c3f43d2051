"""Unit tests for User-Agent classification in user_agent.py."""

import pytest

from deepshortener.utils.user_agent import DeviceSignal, classify_user_agent


ANDROID_CHROME = 'Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Chrome/126.0 Mobile Safari/537.36'
IPHONE_SAFARI = 'Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) AppleWebKit/605.1.15 Version/17.5 Mobile/15E148 Safari/604.1'
IPAD_SAFARI = 'Mozilla/5.0 (iPad; CPU OS 17_5 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148'
DESKTOP_FIREFOX = 'Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0'
IN_APP_ANDROID = f'{ANDROID_CHROME} RydeuApp/3.2.1'
IN_APP_SUPPLIER_IOS = f'{IPHONE_SAFARI} rydeusupplier/1.0'


@pytest.mark.parametrize(
    'user_agent, expected',
    [
        (ANDROID_CHROME, DeviceSignal(is_android=True)),
        (IPHONE_SAFARI, DeviceSignal(is_ios=True)),
        (IPAD_SAFARI, DeviceSignal(is_ios=True)),
        (DESKTOP_FIREFOX, DeviceSignal()),
        (IN_APP_ANDROID, DeviceSignal(is_android=True, is_in_app_browser=True)),
        (IN_APP_SUPPLIER_IOS, DeviceSignal(is_ios=True, is_in_app_browser=True)),
        ('', DeviceSignal()),
        (None, DeviceSignal()),
    ],
)
def test_classify_user_agent(user_agent, expected):
    assert classify_user_agent(user_agent) == expected


@pytest.mark.parametrize(
    'user_agent, expected',
    [
        (ANDROID_CHROME, True),
        (IPHONE_SAFARI, True),
        (DESKTOP_FIREFOX, False),
    ],
)
def test_is_mobile_browser(user_agent, expected):
    assert classify_user_agent(user_agent).is_mobile_browser is expected
