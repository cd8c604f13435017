"""Pydantic models for Mailchimp response envelopes.

Only the envelope is validated. Individual report records stay loosely typed
dicts so the normalizer can default whatever fields are missing or odd.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReportsPage(BaseModel):
    """One page of `GET /3.0/reports`."""

    model_config = ConfigDict(extra="ignore")

    reports: list[dict[str, Any]]
    total_items: Optional[int] = Field(default=None, ge=0)


class AudienceList(BaseModel):
    """Single audience from `GET /3.0/lists`."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""


class ListsPage(BaseModel):
    """One page of `GET /3.0/lists`."""

    model_config = ConfigDict(extra="ignore")

    lists: list[AudienceList] = Field(default_factory=list)
    total_items: Optional[int] = Field(default=None, ge=0)
