"""
Resolution outcomes.

An outcome is either a Redirect or NotFound; NotFound is a normal result,
never an exception.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict
from golinks_app.models.enums import MatchKind


class Redirect(BaseModel):
    domain: str
    slug: str
    destination: str
    kind: MatchKind
    matched_key: str

    model_config = ConfigDict(frozen=True)


class NotFound(BaseModel):
    domain: str
    slug: str  # Empty when the request had no slug at all
    kind: Literal[MatchKind.MISS] = MatchKind.MISS
    matched_key: Optional[str] = None

    model_config = ConfigDict(frozen=True)


Outcome = Union[Redirect, NotFound]
