"""Bearer token authentication for API routes."""

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from macro_tracker.adapters.supabase_auth_gateway import AuthGateway

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

_BEARER_PREFIX = "bearer "


def _get_auth_gateway(request: Request) -> AuthGateway:
    container: AppContainer = request.app.state.container
    return container.auth_gateway


async def require_user(
    authorization: str | None = Header(default=None),
    auth_gateway: AuthGateway = Depends(_get_auth_gateway),
) -> UUID:
    """Resolve the bearer token to the caller's user id."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )
    token = authorization[len(_BEARER_PREFIX) :].strip()
    user_id = auth_gateway.get_user_id(token) if token else None
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return user_id
