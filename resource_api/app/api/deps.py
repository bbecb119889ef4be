"""
FastAPI dependencies.

The user service (and through it the store and the cache) is created
by ``create_app`` and kept on ``app.state``; handlers obtain it here
instead of importing a module‑level global.
"""

from fastapi import Request

from ..services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
