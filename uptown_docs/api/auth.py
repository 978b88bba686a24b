"""JWT bearer auth for the document endpoints.

Tokens are issued by the main sales API and carry `{id, name, email, role}`.
A missing or invalid token is rejected with 401; a role outside the
endpoint's allow-list with 403.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from uptown_docs.config import settings
from uptown_docs.schemas.documents import AuthUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> AuthUser:
    """Verify the signature and map the claims onto AuthUser."""
    secret = settings.security.jwt_secret
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="JWT_SECRET not configured",
        )
    try:
        claims: dict[str, Any] = jwt.decode(token, secret, algorithms=[settings.security.jwt_algorithm])
        return AuthUser(
            user_id=claims.get("id", claims.get("sub")),
            name=claims.get("name"),
            email=claims.get("email"),
            role=claims.get("role"),
        )
    except (JWTError, ValidationError) as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


async def verify_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
) -> AuthUser:
    """FastAPI dependency — authenticated caller, or 401."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_token(credentials.credentials)


def require_roles(roles: Iterable[str]) -> Callable[..., Awaitable[AuthUser]]:
    """Build a dependency that also checks the caller's role."""
    allowed = frozenset(roles)

    async def _guard(user: AuthUser = Depends(verify_user)) -> AuthUser:  # noqa: B008
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return user

    return _guard
