"""
Database helper functions — account lookup and bootstrap records.

"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from auth.password import hash_password
from database.models import Consulta, Medico, Paciente, Usuario
from database.session import async_session_factory

logger = logging.getLogger(__name__)


def normalize_email(correo: Optional[str]) -> str:
    """Trim and lower-case an email address for lookups and storage."""
    return (correo or "").strip().lower()


async def find_usuario_by_correo(session: AsyncSession, correo: str) -> Optional[Usuario]:
    """Return the user for an email (normalised here), or ``None``."""
    normalized = normalize_email(correo)
    if not normalized:
        return None
    result = await session.execute(select(Usuario).where(Usuario.correo == normalized))
    return result.scalar_one_or_none()


async def count_consultas(
    session: AsyncSession,
    *,
    medico_id: Optional[int] = None,
    paciente_id: Optional[int] = None,
) -> int:
    stmt = select(func.count()).select_from(Consulta)
    if medico_id is not None:
        stmt = stmt.where(Consulta.medico_id == medico_id)
    if paciente_id is not None:
        stmt = stmt.where(Consulta.paciente_id == paciente_id)
    return (await session.execute(stmt)).scalar_one()


async def count_usuarios_for_medico(session: AsyncSession, medico_id: int) -> int:
    stmt = select(func.count()).select_from(Usuario).where(Usuario.medico_id == medico_id)
    return (await session.execute(stmt)).scalar_one()


async def medico_exists(session: AsyncSession, medico_id: int) -> bool:
    return await session.get(Medico, medico_id) is not None


async def paciente_exists(session: AsyncSession, paciente_id: int) -> bool:
    return await session.get(Paciente, paciente_id) is not None


async def ensure_seed_admin(correo: Optional[str], password: Optional[str], nombre: str) -> bool:
    """
    Create the bootstrap account if configured and not present yet.

    Returns ``True`` when a row was inserted.
    """
    normalized = normalize_email(correo)
    if not normalized or not password:
        return False

    async with async_session_factory() as session:
        if await find_usuario_by_correo(session, normalized) is not None:
            return False
        session.add(
            Usuario(
                correo=normalized,
                password_hash=await run_in_threadpool(hash_password, password),
                nombre_completo=nombre,
                activo=True,
            )
        )
        await session.commit()

    logger.info("Seeded bootstrap account %s", normalized)
    return True
