"""
Database models for the go links service.

Links and domains belong to the link store; visits, ignored misses and link
events belong to the audit/visit recorder.
"""

from .domain import Domain
from .link import Link
from .visit import Visit, IgnoredMiss
from .link_event import LinkEvent
from .enums import MatchKind, LinkEventType

__all__ = ["Domain", "Link", "Visit", "IgnoredMiss", "LinkEvent", "MatchKind", "LinkEventType"]
