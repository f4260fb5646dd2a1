"""
Slug normalization and key validation.
"""

import re
from typing import Optional

from golinks_app.config import settings
from golinks_app.exceptions import InvalidKey
from golinks_app.services.templates import PLACEHOLDER_PATTERN

# RFC 3986 pchar without percent-encoding, plus "/" as a literal separator
SLUG_ALPHABET = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=:@/]*$")
WHITESPACE = re.compile(r"\s")


def normalize_slug(raw: str) -> str:
    """
    Canonicalize a raw path into a comparable key.

    Strips surrounding whitespace, then removes exactly one leading and one
    trailing "/". Internal and repeated slashes are kept as they are. An
    empty result means "no slug" (the caller routes to the index).
    """
    slug = raw.strip()
    if slug.startswith("/"):
        slug = slug[1:]
    if slug.endswith("/"):
        slug = slug[:-1]
    return slug


def is_admin_path(slug: str, admin_prefix: Optional[str] = None) -> bool:
    """True if the slug falls under the reserved administrative prefix"""
    prefix = settings.admin_prefix if admin_prefix is None else admin_prefix
    return slug == prefix or slug.startswith(prefix + "/")


def validate_key(key: str, admin_prefix: Optional[str] = None) -> None:
    """
    Check a (normalized) key before it is stored.

    Raises:
        InvalidKey: empty, whitespace, admin prefix, stray braces or
            characters outside the slug alphabet
    """
    if not key:
        raise InvalidKey("Slug is required.")
    if WHITESPACE.search(key):
        raise InvalidKey("Slug cannot contain spaces.")
    if is_admin_path(key, admin_prefix):
        raise InvalidKey("Slug cannot use the reserved admin prefix.")

    literal_text = PLACEHOLDER_PATTERN.sub("", key)
    if "{" in literal_text or "}" in literal_text:
        raise InvalidKey("Placeholders must look like {name} using letters, digits or _.")
    if not SLUG_ALPHABET.match(literal_text):
        raise InvalidKey("Slug contains characters that are not allowed.")
