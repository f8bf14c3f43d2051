"""Unit tests for redirect resolution in redirect.py.

Test coverage includes:

1. Decision table (first match wins)
2. Smart banner rendering and escaping
"""

import pytest

from deepshortener.exceptions import MissingLinkDataError
from deepshortener.models import LinkPolicy, RedirectKind, UserType
from deepshortener.utils.redirect import resolve_redirect, render_smart_banner


ANDROID = 'Mozilla/5.0 (Linux; Android 14; Pixel 8) Chrome/126.0 Mobile Safari/537.36'
IPHONE = 'Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) Mobile/15E148 Safari/604.1'
DESKTOP = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/126.0 Safari/537.36'
IN_APP = f'{ANDROID} RydeuApp/3.2.1'


# -------------------------------
# 1. Decision table
# -------------------------------

def test_missing_long_url_raises(make_link, policy):
    with pytest.raises(MissingLinkDataError):
        resolve_redirect(make_link(long_url=''), DESKTOP, policy)


@pytest.mark.parametrize('user_agent', [ANDROID, IPHONE, DESKTOP, IN_APP, None])
def test_link_without_deep_link_always_redirects_to_long_url(make_link, policy, user_agent):
    link = make_link(user_type=UserType.NONE, deep_link=None, ios_link=None)
    decision = resolve_redirect(link, user_agent, policy)

    assert decision.kind == RedirectKind.REDIRECT
    assert decision.location == link.long_url
    assert decision.body is None


def test_in_app_browser_redirects_to_deep_link(make_link, policy):
    link = make_link()
    decision = resolve_redirect(link, IN_APP, policy)

    assert decision.kind == RedirectKind.REDIRECT
    assert decision.location == 'rydeu://app/booking/123'


def test_android_browser_gets_smart_banner(make_link, policy):
    link = make_link()
    decision = resolve_redirect(link, ANDROID, policy)

    assert decision.kind == RedirectKind.SMART_BANNER
    assert decision.location == link.deep_link
    assert '"rydeu://app/booking/123"' in decision.body
    assert '"https://rydeu.com/en/booking/123"' in decision.body
    assert '1500' in decision.body


def test_ios_browser_gets_smart_banner_with_ios_link(make_link, policy):
    link = make_link(deep_link='rydeu://app/booking/123', ios_link='rydeu://app/ios/booking/123')
    decision = resolve_redirect(link, IPHONE, policy)

    assert decision.kind == RedirectKind.SMART_BANNER
    assert decision.location == 'rydeu://app/ios/booking/123'
    assert '"rydeu://app/ios/booking/123"' in decision.body


def test_ios_browser_falls_back_to_deep_link_without_ios_link(make_link, policy):
    link = make_link(ios_link=None)
    decision = resolve_redirect(link, IPHONE, policy)

    assert decision.location == link.deep_link


@pytest.mark.parametrize('user_agent', [DESKTOP, '', None])
def test_desktop_redirects_to_long_url(make_link, policy, user_agent):
    link = make_link()
    decision = resolve_redirect(link, user_agent, policy)

    assert decision.kind == RedirectKind.REDIRECT
    assert decision.location == link.long_url


def test_smart_banner_uses_policy_delay(make_link):
    decision = resolve_redirect(make_link(), ANDROID, LinkPolicy(fallback_delay_ms=2500))
    assert '}, 2500);' in decision.body


# -------------------------------
# 2. Smart banner rendering
# -------------------------------

@pytest.mark.parametrize(
    'user_type, title',
    [
        (UserType.CUSTOMER, 'Opening Rydeu'),
        (UserType.SUPPLIER, 'Opening Rydeu Supplier'),
    ],
)
def test_render_smart_banner_title(user_type, title):
    html = render_smart_banner('rydeu://app/x', 'https://rydeu.com/en/x', user_type, 1500)
    assert f'<title>{title}</title>' in html
    assert f'<h3>{title}...</h3>' in html


def test_render_smart_banner_escapes_urls():
    web_url = 'https://rydeu.com/en/x?a=1&b="</script><script>alert(1)</script>'
    html = render_smart_banner('rydeu://app/x', web_url, UserType.CUSTOMER, 1500)

    assert '</script><script>alert(1)' not in html
    assert '\\u003c/script\\u003e' in html
    assert 'href="https://rydeu.com/en/x?a=1&amp;b=&quot;&lt;/script&gt;' in html
