"""Redirect target resolution

Picks the final target for a short link request from the stored link and the
caller's User-Agent. The resolver is pure: no I/O, no side effects.

Decision table (first match wins):
    1. link has no long URL             -> MissingLinkDataError
    2. link has no deep link            -> redirect to long URL
    3. caller is the in-app browser     -> redirect to deep link
    4. caller is an Android/iOS browser -> smart banner (app link, timed web fallback)
    5. anything else                    -> redirect to long URL

Functions:
    resolve_redirect(link, user_agent, policy) -> RedirectDecision
    render_smart_banner(app_url, web_url, user_type, fallback_delay_ms) -> str

Example:
    >>> decision = resolve_redirect(link, 'Mozilla/5.0 (Linux; Android 14)', LinkPolicy())
    >>> decision.kind
    <RedirectKind.SMART_BANNER: 'smart_banner'>
"""

import html
import json

from deepshortener.exceptions import MissingLinkDataError
from deepshortener.models import LinkModel, LinkPolicy, RedirectDecision, RedirectKind, UserType
from deepshortener.utils.user_agent import classify_user_agent


SMART_BANNER_TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title}</title>
  <script>
    window.location.href = {app_url_js};
    setTimeout(function() {{
      window.location.href = {web_url_js};
    }}, {delay});
  </script>
</head>
<body>
  <h3>{title}...</h3>
  <p>If the app doesn't open automatically, please wait or use the link below.</p>
  <a href="{web_url_attr}">Continue in browser</a>
</body>
</html>
"""


def resolve_redirect(link: LinkModel, user_agent: str | None, policy: LinkPolicy) -> RedirectDecision:
    if not link.long_url:
        raise MissingLinkDataError(f"Link '{link.short_id}' has no long URL.")

    if not link.deep_link:
        return RedirectDecision(kind=RedirectKind.REDIRECT, location=link.long_url)

    device = classify_user_agent(user_agent)

    if device.is_in_app_browser:
        return RedirectDecision(kind=RedirectKind.REDIRECT, location=link.deep_link)

    if device.is_mobile_browser:
        app_url = link.ios_link if device.is_ios and link.ios_link else link.deep_link
        body = render_smart_banner(app_url, link.long_url, link.user_type, policy.fallback_delay_ms)
        return RedirectDecision(kind=RedirectKind.SMART_BANNER, location=app_url, body=body)

    return RedirectDecision(kind=RedirectKind.REDIRECT, location=link.long_url)


def render_smart_banner(app_url: str, web_url: str, user_type: UserType, fallback_delay_ms: int) -> str:
    title = 'Opening Rydeu Supplier' if user_type == UserType.SUPPLIER else 'Opening Rydeu'
    return SMART_BANNER_TEMPLATE.format(
        title=html.escape(title),
        app_url_js=_js_string(app_url),
        web_url_js=_js_string(web_url),
        web_url_attr=html.escape(web_url, quote=True),
        delay=int(fallback_delay_ms),
    )


def _js_string(value: str) -> str:
    # Keep '</script>' and friends from terminating the inline script
    return json.dumps(value).replace('<', '\\u003c').replace('>', '\\u003e').replace('&', '\\u0026')
