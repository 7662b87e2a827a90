"""URL slugs derived from entity names."""

import re

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def slugify(name: str) -> str:
    """Lowercase the name and replace every non-alphanumeric character with a hyphen.

    >>> slugify("Running Shoes & Socks")
    'running-shoes---socks'
    """
    return _NON_ALPHANUMERIC.sub("-", name.lower())
