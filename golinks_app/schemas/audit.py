from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from golinks_app.models.enums import LinkEventType


class LinkEventResponse(BaseModel):
    id: int
    domain: str
    key: str
    event_type: LinkEventType
    destination: Optional[str] = None
    default_destination: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LinkStats(BaseModel):
    """Visit totals for one link, broken down by outcome kind"""
    domain: str
    key: str
    total: int = 0
    exact: int = 0
    template: int = 0
    default: int = 0


class MissStat(BaseModel):
    domain: str
    slug: str
    count: int


class IgnoreMissRequest(BaseModel):
    domain: str
    slug: str
