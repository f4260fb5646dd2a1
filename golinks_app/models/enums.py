from enum import Enum


class MatchKind(str, Enum):
    """How a resolution was decided (stored as the visit outcome)"""
    EXACT = "exact"
    TEMPLATE = "template"
    DEFAULT = "default"
    MISS = "miss"


class LinkEventType(str, Enum):
    """Kind of mutation recorded in the link audit trail"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
