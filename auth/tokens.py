"""
JWT creation and verification.

Tokens are standard ``header.claims.signature`` JWTs signed with HMAC-SHA256.
Signing key, issuer, audience and lifetime come from ``config`` (env vars
``JWT_KEY``, ``JWT_ISSUER``, ``JWT_AUDIENCE``, ``JWT_EXPIRES_MINUTES``) and are
handed to :class:`TokenIssuer` as an immutable :class:`JwtSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from auth.models import CurrentUser, Identity
from config.settings import ConfigurationError, Settings

ALGORITHM = "HS256"
MIN_KEY_BYTES = 32
MEDICO_ID_CLAIM = "medicoId"


@dataclass(frozen=True)
class JwtSettings:
    key: str = field(repr=False)
    issuer: str
    audience: str
    expires_minutes: int

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            raise ConfigurationError("JWT_KEY is not configured")
        if len(self.key.encode("utf-8")) < MIN_KEY_BYTES:
            raise ConfigurationError(
                f"JWT_KEY must be at least {MIN_KEY_BYTES} bytes for {ALGORITHM}"
            )
        if self.expires_minutes <= 0:
            raise ConfigurationError("JWT_EXPIRES_MINUTES must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtSettings":
        return cls(
            key=settings.jwt_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expires_minutes=settings.jwt_expires_minutes,
        )

    @property
    def signing_key(self) -> bytes:
        return self.key.encode("utf-8")


@dataclass(frozen=True)
class TokenResult:
    token: str
    expires_at: datetime


class TokenIssuer:
    """Mints signed access tokens for authenticated identities."""

    def __init__(self, settings: JwtSettings) -> None:
        self.settings = settings

    def issue(self, identity: Optional[Identity]) -> TokenResult:
        if identity is None:
            raise ValueError("identity is required")

        expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=self.settings.expires_minutes
        )
        claims: Dict[str, Any] = {
            "sub": str(identity.id),
            "email": identity.correo,
            "name": identity.nombre_completo,
        }
        if identity.medico_id is not None:
            claims[MEDICO_ID_CLAIM] = str(identity.medico_id)

        claims.update(
            {
                "iss": self.settings.issuer,
                "aud": self.settings.audience,
                "exp": expires_at,
            }
        )
        token = jwt.encode(claims, self.settings.signing_key, algorithm=ALGORITHM)
        return TokenResult(token=token, expires_at=expires_at)


def decode_token(token: str, settings: JwtSettings) -> Dict[str, Any]:
    """
    Validate a bearer token and return its claims.

    Checks signature, issuer, audience and expiry with no clock-skew
    allowance. Raises ``jwt.InvalidTokenError`` on any failure.
    """
    return jwt.decode(
        token,
        settings.signing_key,
        algorithms=[ALGORITHM],
        audience=settings.audience,
        issuer=settings.issuer,
        leeway=0,
        options={"require": ["exp", "iss", "aud", "sub"]},
    )


def current_user_from_claims(claims: Dict[str, Any]) -> CurrentUser:
    """Rebuild the principal from validated claims."""
    try:
        user_id = int(claims["sub"])
        medico_raw = claims.get(MEDICO_ID_CLAIM)
        medico_id = int(medico_raw) if medico_raw is not None else None
    except (KeyError, TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError(f"malformed identity claims: {exc}") from exc

    return CurrentUser(
        id=user_id,
        correo=claims.get("email", ""),
        nombre_completo=claims.get("name", ""),
        medico_id=medico_id,
    )
