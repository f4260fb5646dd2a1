"""
Template matching strategies using Strategy Pattern.
Allows switching between a regular-expression matcher and a hand-written scanner.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from golinks_app.services.templates import parse_template


class TemplateMatcher(ABC):
    """
    Abstract base class for template matching strategies.

    A matcher is built from one template key. Each placeholder captures one
    or more characters other than "/"; literal text, slashes included, must
    match exactly. When a placeholder name repeats, the later capture wins.

    Both strategies must return identical captures for every input.
    """

    def __init__(self, key: str):
        self.key = key
        self.tokens = parse_template(key)
        self.names = [text for is_placeholder, text in self.tokens if is_placeholder]
        if not self.names:
            raise ValueError(f"Key has no placeholders: {key!r}")

    @abstractmethod
    def match(self, slug: str) -> Optional[Dict[str, str]]:
        """
        Match a concrete slug against the template.

        Args:
            slug: Normalized slug

        Returns:
            Mapping of placeholder name to captured value, or None
        """
        pass


class RegexTemplateMatcher(TemplateMatcher):
    """
    Rebuilds the key as an anchored regular expression.

    Literals are escaped, placeholders become positional ([^/]+) groups.
    Positional rather than named groups so that repeated names still compile.
    """

    def __init__(self, key: str):
        super().__init__(key)
        pattern = "".join(
            "([^/]+)" if is_placeholder else re.escape(text)
            for is_placeholder, text in self.tokens
        )
        self.pattern = re.compile(pattern)

    def match(self, slug: str) -> Optional[Dict[str, str]]:
        found = self.pattern.fullmatch(slug)
        if found is None:
            return None
        values: Dict[str, str] = {}
        for name, value in zip(self.names, found.groups()):
            values[name] = value
        return values


class ScannerTemplateMatcher(TemplateMatcher):
    """
    Sequential scanner over literal/placeholder tokens.

    A placeholder greedily takes everything up to the next "/" (or the end)
    and gives characters back one at a time until the rest of the key
    matches, which reproduces the regex strategy's captures exactly.
    """

    def match(self, slug: str) -> Optional[Dict[str, str]]:
        captures: List[Tuple[str, str]] = []
        if not self._scan(slug, 0, 0, captures):
            return None
        return dict(captures)

    def _scan(self, slug: str, index: int, position: int, captures: List[Tuple[str, str]]) -> bool:
        if index == len(self.tokens):
            return position == len(slug)

        is_placeholder, text = self.tokens[index]
        if not is_placeholder:
            if not slug.startswith(text, position):
                return False
            return self._scan(slug, index + 1, position + len(text), captures)

        segment_end = slug.find("/", position)
        if segment_end == -1:
            segment_end = len(slug)

        for stop in range(segment_end, position, -1):
            captures.append((text, slug[position:stop]))
            if self._scan(slug, index + 1, stop, captures):
                return True
            captures.pop()
        return False
