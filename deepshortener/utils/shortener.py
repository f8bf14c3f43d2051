"""Short identifier generation utility

Functions:
    generate_short_id(length=8) -> str:
        Generate a random, URL-safe short identifier.

Example:
    >>> from deepshortener.utils import generate_short_id
    >>> generate_short_id()
    'V1StGXR8'
"""

import secrets
import string

from deepshortener.constants import ShortId


ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + '_-'


def generate_short_id(length: int = ShortId.LENGTH) -> str:
    """Generate a random short identifier from a URL-safe alphabet.

    Uses the `secrets` CSPRNG over a 64-symbol alphabet, so an 8-character
    identifier draws from 64**8 (~2.8e14) values.

    Args:
        length (int, optional):
            Number of characters. Defaults to 8.

    Returns:
        str: A random identifier over [A-Za-z0-9_-].

    NOTE:
        Collisions are not checked here. LinkStore checks the cache and
        retries a bounded number of times before giving up.
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
