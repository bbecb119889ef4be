"""
User endpoints.

``GET /api/users`` pages through the collection with a cursor (the id
of the last user of the previous page) and an optional field selector;
pages are served through the TTL cache.  Writes require a bearer token
and invalidate the cached pages.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...core.security import get_current_user
from ...schemas.common import ApiError, PageResponse, RecordResponse
from ...schemas.user import UserCreate, UserUpdate
from ...services.pagination import parse_fields
from ...services.user_service import UserService, record_links
from ..deps import get_user_service


router = APIRouter()

_ERRORS = {
    400: {"model": ApiError, "description": "Invalid parameters or payload"},
}


@router.get(
    "",
    response_model=PageResponse,
    response_model_exclude_none=True,
    responses=_ERRORS,
)
async def list_users(
    cursor: Optional[str] = Query(None, description="Id of the last user of the previous page"),
    limit: Optional[int] = Query(None, description="Maximum number of users to return (1-100, default 10)"),
    fields: Optional[str] = Query(None, description='Comma‑separated fields to include, e.g. "id,user_name,email"'),
    include_total: bool = Query(False, description="Report the collection size in meta.total_count"),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """List users with cursor pagination and HATEOAS links.

    Follow ``_links.next`` until it is absent to walk the whole
    collection.  A cursor that refers to a deleted user restarts from
    the first user.
    """
    return await service.list_users(
        cursor=cursor,
        limit=limit,
        fields=parse_fields(fields),
        include_total=include_total,
    )


@router.get(
    "/{user_id}",
    response_model=RecordResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ApiError, "description": "User not found"}},
)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    """Retrieve a single user by id."""
    record = await service.get_user(user_id)
    return {"data": record, "_links": record_links(user_id)}


@router.post(
    "",
    response_model=RecordResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 401: {"model": ApiError, "description": "Not authenticated"}},
)
async def create_user(
    user: UserCreate,
    response: Response,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Create a user.

    Requires a valid bearer token.  The new user is appended to the end
    of the collection, so it shows up after every existing user when
    paginating.
    """
    record = await service.create_user(user.model_dump(mode="json"), current_user)
    response.headers["Location"] = record_links(record["id"])["self"]["href"]
    return {"data": record, "_links": record_links(record["id"])}


@router.patch(
    "/{user_id}",
    response_model=RecordResponse,
    response_model_exclude_none=True,
    responses={
        **_ERRORS,
        401: {"model": ApiError, "description": "Not authenticated"},
        404: {"model": ApiError, "description": "User not found"},
    },
)
async def update_user(
    user_id: str,
    updates: UserUpdate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Partially update a user.

    Only the fields present in the body are replaced; ``updated_at`` is
    stamped on every successful update.
    """
    record = await service.update_user(user_id, updates.model_dump(mode="json", exclude_unset=True))
    return {"data": record, "_links": {"self": {"href": record_links(user_id)["self"]["href"]}}}


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ApiError, "description": "Not authenticated"}, 404: {"model": ApiError, "description": "User not found"}},
)
async def delete_user(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user.  Cursors pointing at it fall back to the first page."""
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
