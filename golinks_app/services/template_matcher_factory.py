"""
Factory for creating template matchers.
"""

from enum import Enum
from typing import Optional

from golinks_app.services.template_matchers import (
    TemplateMatcher,
    RegexTemplateMatcher,
    ScannerTemplateMatcher
)
from golinks_app.services.templates import is_template_key
from golinks_app.config import settings


class TemplateMatcherType(Enum):
    """Available template matching strategies"""
    REGEX = "regex"
    SCANNER = "scanner"


class TemplateMatcherFactory:
    """Factory for compiling template keys into matchers"""

    _classes = {
        TemplateMatcherType.REGEX: RegexTemplateMatcher,
        TemplateMatcherType.SCANNER: ScannerTemplateMatcher,
    }

    @classmethod
    def create(
        cls,
        key: str,
        matcher_type: TemplateMatcherType = None
    ) -> Optional[TemplateMatcher]:
        """
        Compile a key into a matcher.

        Args:
            key: Stored link key
            matcher_type: Strategy to use. If None, uses value from settings.

        Returns:
            A TemplateMatcher, or None when the key has no placeholders
            (literal keys only ever match exactly)

        Raises:
            ValueError: If matcher_type is unknown
        """
        if matcher_type is None:
            matcher_type = TemplateMatcherType(settings.template_matcher)

        if not is_template_key(key):
            return None

        matcher_class = cls._classes.get(matcher_type)
        if matcher_class is None:
            raise ValueError(f"Unknown matcher type: {matcher_type}")
        return matcher_class(key)
