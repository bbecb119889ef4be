"""
Cursor‑based pagination.

``paginate`` turns a cursor, a page size and an optional field selector
into a ``Page``: the records, the cursor for the following page and the
HATEOAS links describing both.  The cursor is the id of the last record
of the previous page; chaining ``cursor <- next_cursor`` visits every
record that existed when pagination began exactly once, in insertion
order, and ends with a page that has no ``next``.

A page shorter than the requested limit is taken as the end of the
collection.  A record inserted between two requests exactly at the
boundary of a full last page is therefore only seen by clients that
request the (then empty‑looking) next page; a per‑record sequence
number would remove that blind spot.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlencode

from ..core.errors import InvalidArgument
from .resource_store import Record, ResourceStore


DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass
class Page:
    """One bounded view over a store."""

    records: List[Record]
    self_href: str
    limit: int
    next_cursor: Optional[str] = None
    next_href: Optional[str] = None
    total_count: Optional[int] = None
    links: Dict[str, Dict[str, str]] = field(init=False)

    def __post_init__(self) -> None:
        self.links = {"self": {"href": self.self_href}}
        if self.next_href is not None:
            self.links["next"] = {"href": self.next_href}

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    def to_dict(self) -> Dict[str, Any]:
        """Render the page in the response envelope layout."""
        meta: Dict[str, Any] = {"page_size": self.limit}
        if self.total_count is not None:
            meta["total_count"] = self.total_count
        return {"data": self.records, "_links": self.links, "meta": meta}


def parse_fields(raw: Optional[str]) -> Optional[List[str]]:
    """Split a comma‑separated field list; ``None`` when nothing was selected."""
    if raw is None:
        return None
    names = [name.strip() for name in raw.split(",")]
    names = [name for name in names if name]
    return names or None


def project(record: Record, fields: Optional[Sequence[str]]) -> Record:
    """Keep only the named fields of ``record``.  Unknown names are ignored."""
    if not fields:
        return record
    return {name: record[name] for name in fields if name in record}


def _check_arguments(cursor: Any, limit: Any, max_page_size: int) -> None:
    # bool is an int subclass but never a meaningful page size
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument("limit must be an integer", details={"limit": limit})
    if not 1 <= limit <= max_page_size:
        raise InvalidArgument(
            f"limit must be between 1 and {max_page_size}",
            details={"limit": limit},
        )
    if cursor is not None and not isinstance(cursor, str):
        raise InvalidArgument("cursor must be a string", details={"cursor": repr(cursor)})


def build_href(base_path: str, **params: Any) -> str:
    query = [(key, value) for key, value in params.items() if value is not None]
    if not query:
        return base_path
    return f"{base_path}?{urlencode(query)}"


def paginate(
    store: ResourceStore,
    cursor: Optional[str] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    fields: Optional[Iterable[str]] = None,
    base_path: str = "",
    include_total: bool = False,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Page:
    """Build the page of ``store`` that follows ``cursor``.

    Parameters
    ----------
    store : ResourceStore
        Collection to read from.
    cursor : Optional[str]
        Id of the last record of the previous page, or ``None`` for the
        first page.  Unknown cursors restart from the beginning.
    limit : int
        Page size, within ``[1, max_page_size]``; anything else raises
        ``InvalidArgument`` before the store is touched.
    fields : Optional[Iterable[str]]
        Field selector applied to each returned record.
    base_path : str
        Path the ``self`` and ``next`` links are built on.
    include_total : bool
        Report the current size of the collection in ``meta.total_count``.
    """
    _check_arguments(cursor, limit, max_page_size)
    selected = list(fields) if fields is not None else None
    fields_param = ",".join(selected) if selected else None

    records = store.list(cursor, limit)
    next_cursor = records[-1]["id"] if len(records) == limit else None

    self_href = build_href(base_path, cursor=cursor, limit=limit, fields=fields_param)
    next_href = None
    if next_cursor is not None:
        next_href = build_href(base_path, cursor=next_cursor, limit=limit, fields=fields_param)

    return Page(
        records=[project(record, selected) for record in records],
        self_href=self_href,
        limit=limit,
        next_cursor=next_cursor,
        next_href=next_href,
        total_count=store.count() if include_total else None,
    )
