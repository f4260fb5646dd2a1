from pydantic import BaseModel, Field, computed_field, ConfigDict
from typing import Optional
from datetime import datetime
from golinks_app.config import settings
from golinks_app.services.templates import template_root


class LinkUpsert(BaseModel):
    """Payload for creating or replacing a link.

    Destinations stay plain strings so {name} placeholders are stored as
    typed; the link store checks them against HttpUrl without keeping the
    parsed form.
    """
    domain: str = Field(default_factory=lambda: settings.default_domain, description="Owning domain")
    key: str = Field(..., description="Literal slug or template such as docs/{section}")
    destination: str = Field(..., description="Target URL, may use the key's placeholders")
    default_destination: Optional[str] = Field(None, description="Used when a template's root is visited")


class LinkResponse(BaseModel):
    """Serialized Link row (reads straight from the SQLAlchemy model)"""
    id: int
    domain: str
    key: str
    destination: str
    default_destination: Optional[str] = None
    is_template: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def root(self) -> Optional[str]:
        """Base path that serves default_destination (templates only)"""
        if not self.is_template:
            return None
        return template_root(self.key)

    model_config = ConfigDict(from_attributes=True)


class DomainCreate(BaseModel):
    name: str


class DomainResponse(BaseModel):
    name: str
    link_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
