"""
Response envelopes shared by all endpoints.

Responses follow a HATEOAS layout: the payload lives under ``data`` and
navigation lives under ``_links``.  Because pydantic does not allow
field names starting with an underscore, the links are declared with
an alias.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    href: str
    method: Optional[str] = None


class PageLinks(BaseModel):
    self_: Link = Field(..., alias="self")
    next: Optional[Link] = None

    model_config = ConfigDict(populate_by_name=True)


class PageMeta(BaseModel):
    page_size: int
    total_count: Optional[int] = None


class PageResponse(BaseModel):
    """A page of records.  ``_links.next`` is absent on the last page."""

    data: List[Dict[str, Any]]
    links: PageLinks = Field(..., alias="_links")
    meta: PageMeta

    model_config = ConfigDict(populate_by_name=True)


class RecordResponse(BaseModel):
    data: Dict[str, Any]
    links: Dict[str, Link] = Field(..., alias="_links")

    model_config = ConfigDict(populate_by_name=True)


class ApiError(BaseModel):
    """Body of every error response."""

    error: str
    message: str
    details: Optional[Any] = None
