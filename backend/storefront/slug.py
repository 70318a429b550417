"""
Storefront Backend: Slug Generator
====================================

Turns free text into a URL-safe identifier:

    >>> create_slug("Acme Hardware & Co.")
    'acme-hardware-co'
    >>> create_slug("Widget", unique=True)  # doctest: +SKIP
    'widget-1700000000'

Anything outside [a-z0-9] after lower-casing (including accented letters)
collapses into a single hyphen. Input with no alphanumeric characters yields
an empty slug.
"""

import re
import time

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def create_slug(value: str, unique: bool = False) -> str:
    """
    Build a slug from `value`.

    Args:
        value:  Free text, usually an entity name.
        unique: Append "-<unix seconds>" so repeated names get distinct slugs.
    """
    slug = _NON_ALNUM.sub("-", value.lower()).strip("-")
    if unique:
        return f"{slug}-{int(time.time())}"
    return slug
