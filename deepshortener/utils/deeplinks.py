from deepshortener.models import UserType


def derive_deep_links(long_url: str, user_type: UserType) -> tuple[str | None, str | None]:
    """Derive (deep_link, ios_link) for a long URL.

    The app path is what follows the first path segment of the web URL
    (the web-only prefix, e.g. a locale): 'https://example.com/a/b/c'
    maps to 'b/c'. Query strings and fragments are carried over verbatim.
    Only customers and suppliers get links; every other user type yields
    (None, None).

    Example:
        >>> derive_deep_links('https://example.com/a/b/c', UserType.CUSTOMER)
        ('rydeu://app/b/c', 'rydeu://app/b/c')
        >>> derive_deep_links('https://example.com/a/b/c', UserType.ORGANIZATION)
        (None, None)
    """
    scheme = user_type.deep_link_scheme
    if scheme is None:
        return None, None

    # ['https:', '', 'example.com', 'a', 'b', 'c'] -> 'b/c'
    path = '/'.join(long_url.split('/')[4:])
    deep_link = f'{scheme}://app/{path}'
    return deep_link, deep_link
