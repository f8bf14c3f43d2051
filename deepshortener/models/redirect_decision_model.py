from dataclasses import dataclass
from enum import StrEnum


class RedirectKind(StrEnum):
    REDIRECT = 'redirect'          # 302 with a Location header
    SMART_BANNER = 'smart_banner'  # 200 HTML page that tries the app first


# fmt: off
@dataclass(frozen=True)
class RedirectDecision:
    kind: RedirectKind       # How the HTTP layer should answer
    location: str            # Final target for redirects, app link for smart banners
    body: str | None = None  # HTML page for smart banners
# fmt: on
