"""
Template keys: parsing, root computation and destination expansion.

A template key contains one or more {name} placeholders, e.g.
"docs/{section}". Matching a concrete slug against it is delegated to a
TemplateMatcher strategy (see template_matchers.py).
"""

import re
from typing import Dict, List, Optional, Tuple

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z0-9_]+)\}")

# A parsed key is a sequence of (is_placeholder, text) tokens where text is
# either the literal text or the placeholder name.
Token = Tuple[bool, str]


def is_template_key(key: str) -> bool:
    """True iff the key contains at least one {name} placeholder"""
    return PLACEHOLDER_PATTERN.search(key) is not None


def parse_template(key: str) -> List[Token]:
    """
    Split a key into literal and placeholder tokens, in order.

    Empty literals (e.g. between "{a}{b}") are dropped.
    """
    tokens: List[Token] = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(key):
        if match.start() > position:
            tokens.append((False, key[position:match.start()]))
        tokens.append((True, match.group(1)))
        position = match.end()
    if position < len(key):
        tokens.append((False, key[position:]))
    return tokens


def template_root(key: str) -> Optional[str]:
    """
    Literal prefix of a template key before its first "{".

    One trailing "/" is stripped. Returns None when the key starts with a
    placeholder or has no "{" at all, since such keys have no base path a
    default destination could hang off.
    """
    index = key.find("{")
    if index <= 0:
        return None
    root = key[:index]
    if root.endswith("/"):
        root = root[:-1]
    return root or None


def expand_destination(destination: str, values: Dict[str, str]) -> str:
    """
    Substitute captured values into a destination URL template.

    Placeholders with no captured value become the empty string.
    """
    return PLACEHOLDER_PATTERN.sub(lambda match: values.get(match.group(1), ""), destination)
