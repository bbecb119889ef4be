"""
Business logic for users.

``UserService`` is the only entry point the HTTP layer uses to reach the
user collection.  Reads go through the TTL cache: a rendered page is
cached under a key derived from the request parameters and single
records are cached by id.  Every write mutates the store directly and
then drops the cached pages (and the cached copy of the record it
touched), so a cached page never outlives the data it was built from.
"""

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from ..core.cache import TTLCache
from ..schemas.user import UserCreate, UserUpdate
from .pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, paginate
from .resource_store import Record, ResourceStore


logger = logging.getLogger(__name__)

USERS_PATH = "/api/users"

PAGE_KEY_PREFIX = "users:page:"
ITEM_KEY_PREFIX = "users:item:"


def record_links(record_id: str) -> Dict[str, Dict[str, str]]:
    """HATEOAS links advertised for a single user."""
    href = f"{USERS_PATH}/{record_id}"
    return {
        "self": {"href": href},
        "update": {"href": href, "method": "PATCH"},
        "delete": {"href": href, "method": "DELETE"},
    }


def new_user_store() -> ResourceStore:
    return ResourceStore(name="users", create_schema=UserCreate, update_schema=UserUpdate)


class UserService:
    """Cached access to the user collection."""

    def __init__(
        self,
        store: ResourceStore,
        cache: TTLCache,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.cache = cache
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    @staticmethod
    def _page_key(cursor: Optional[str], limit: int, fields: Optional[Iterable[str]], include_total: bool) -> str:
        # cursor and field names are caller supplied; JSON keeps them apart
        params = [cursor, limit, list(fields) if fields else None, include_total]
        return PAGE_KEY_PREFIX + json.dumps(params)

    def _invalidate(self, record_id: Optional[str] = None) -> None:
        dropped = self.cache.delete_prefix(PAGE_KEY_PREFIX)
        if record_id is not None:
            self.cache.delete(f"{ITEM_KEY_PREFIX}{record_id}")
        logger.debug("Invalidated %d cached user pages", dropped)

    async def list_users(
        self,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        fields: Optional[Iterable[str]] = None,
        include_total: bool = False,
    ) -> Dict[str, Any]:
        """Return one page of users as a response envelope.

        Pages are served from the cache when the same parameters were
        requested since the last write.  An empty cursor is the same
        request as no cursor.
        """
        if not cursor:
            cursor = None
        if limit is None:
            limit = self.default_page_size
        selected = list(fields) if fields else None
        key = self._page_key(cursor, limit, selected, include_total)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        page = paginate(
            self.store,
            cursor=cursor,
            limit=limit,
            fields=selected,
            base_path=USERS_PATH,
            include_total=include_total,
            max_page_size=self.max_page_size,
        )
        body = page.to_dict()
        self.cache.set(key, body)
        return body

    async def get_user(self, user_id: str) -> Record:
        key = f"{ITEM_KEY_PREFIX}{user_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return dict(cached)
        record = self.store.get(user_id)
        self.cache.set(key, dict(record))
        return record

    async def create_user(self, fields: Mapping[str, Any], current_user: Optional[dict] = None) -> Record:
        record = self.store.create(fields)
        self._invalidate()
        logger.info("User %s created by %s", record["id"], (current_user or {}).get("sub", "anonymous"))
        return record

    async def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Record:
        record = self.store.update(user_id, updates)
        self._invalidate(user_id)
        return record

    async def delete_user(self, user_id: str) -> None:
        self.store.delete(user_id)
        self._invalidate(user_id)
