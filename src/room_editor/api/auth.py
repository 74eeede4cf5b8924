"""Bearer token authentication for API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from room_editor.domain.errors import UnauthorizedError

if TYPE_CHECKING:
    from room_editor.containers import AppContainer


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """Resolve the calling user's id from the Authorization header."""
    container: AppContainer = request.app.state.container
    token = (authorization or "").removeprefix("Bearer ").strip()
    if not token:
        raise UnauthorizedError("Unauthorized")
    user_id = container.auth_verifier.get_user_id(token)
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    return user_id
