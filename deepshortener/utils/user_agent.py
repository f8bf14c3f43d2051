"""User-Agent classification for redirect resolution

All matches are case-insensitive substring matches.

Classes:
    DeviceSignal:
        Flags extracted from a User-Agent header.

Functions:
    classify_user_agent(user_agent: str | None) -> DeviceSignal
"""

import re
from dataclasses import dataclass


ANDROID_PATTERN = re.compile(r'android', re.IGNORECASE)
IOS_PATTERN = re.compile(r'iphone|ipad|ipod', re.IGNORECASE)
# The product's own mobile apps append one of these tokens to their web view agent
IN_APP_BROWSER_PATTERN = re.compile(r'RydeuApp|RydeuSupplier', re.IGNORECASE)


@dataclass(frozen=True)
class DeviceSignal:
    is_android: bool = False
    is_ios: bool = False
    is_in_app_browser: bool = False

    @property
    def is_mobile_browser(self) -> bool:
        return self.is_android or self.is_ios


def classify_user_agent(user_agent: str | None) -> DeviceSignal:
    user_agent = user_agent or ''
    return DeviceSignal(
        is_android=bool(ANDROID_PATTERN.search(user_agent)),
        is_ios=bool(IOS_PATTERN.search(user_agent)),
        is_in_app_browser=bool(IN_APP_BROWSER_PATTERN.search(user_agent)),
    )
