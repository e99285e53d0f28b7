"""
Auth API routes — login, current user.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from auth.dependencies import db_session, get_current_user, get_token_issuer
from auth.models import CurrentUser, Identity
from auth.password import verify_dummy, verify_password
from auth.tokens import TokenIssuer
from database.helpers import find_usuario_by_correo, normalize_email
from utils.schemas import LoginRequest, LoginResponse, UsuarioSummary

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    """Login with email + password."""
    correo = normalize_email(req.correo)
    if not correo or not req.password.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required.",
        )

    usuario = await find_usuario_by_correo(session, correo)

    # Unknown accounts still pay for one key derivation.
    if usuario is None:
        await run_in_threadpool(verify_dummy, req.password)
        logger.info("Login rejected for unknown account")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not await run_in_threadpool(verify_password, usuario.password_hash, req.password):
        logger.info("Login rejected for user %s: bad password", usuario.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not usuario.activo:
        logger.info("Login rejected for user %s: inactive", usuario.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )

    identity = Identity.from_usuario(usuario)
    result = issuer.issue(identity)
    logger.info("Login: %s (%s)", identity.nombre_completo, identity.id)

    return LoginResponse(
        token=result.token,
        expiracion=result.expires_at,
        usuario=UsuarioSummary(
            id=identity.id,
            correo=identity.correo,
            nombre_completo=identity.nombre_completo,
            medico_id=identity.medico_id,
        ),
    )


@router.get("/me", response_model=UsuarioSummary)
async def me(current: CurrentUser = Depends(get_current_user)) -> UsuarioSummary:
    """Identity carried by the presented token."""
    return UsuarioSummary(
        id=current.id,
        correo=current.correo,
        nombre_completo=current.nombre_completo,
        medico_id=current.medico_id,
    )
