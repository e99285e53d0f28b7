"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_token_issuer`` and ``get_current_user``
dependencies that are used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.models import CurrentUser
from auth.tokens import TokenIssuer, current_user_from_claims, decode_token
from database.session import get_db_session

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_token_issuer(request: Request) -> TokenIssuer:
    """The issuer built once by ``create_app``."""
    return request.app.state.token_issuer


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> CurrentUser:
    """
    Validate the Bearer token (signature, issuer, audience, expiry) and
    return the principal it names.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing Bearer token")

    try:
        claims = decode_token(credentials.credentials, issuer.settings)
        return current_user_from_claims(claims)
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise _unauthorized("Invalid or expired token")
