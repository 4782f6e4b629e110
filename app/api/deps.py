"""Auth dependencies: bearer access-token authentication and exact-match role gating."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import decode_access_token
from app.schemas.auth import AuthenticatedUser
from app.schemas.user import Role

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authenticate(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUser:
    """
    Dependency: require a valid Bearer access token and attach its identity to request.state.user.

    Claims are trusted as signed; no database lookup. Expired, tampered and
    refresh tokens all get the same 401.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        identity = AuthenticatedUser(
            user_id=int(payload["sub"]),
            role=payload["role"],
            email=payload["email"],
        )
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid or expired token")
    request.state.user = identity
    return identity


def require_role(role: Role) -> Callable[[Request], AuthenticatedUser]:
    """
    Dependency factory: 401 without an attached identity, 403 unless identity.role == role.

    No hierarchy: ADMIN does not satisfy a USER-only check. Declare after
    `authenticate` in the route's dependencies.
    """

    def check_role(request: Request) -> AuthenticatedUser:
        identity: AuthenticatedUser | None = getattr(request.state, "user", None)
        if identity is None:
            raise _unauthorized("Not authenticated")
        if identity.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return identity

    return check_role
