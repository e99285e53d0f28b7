"""
REST API routes for clinic records — usuarios, medicos, pacientes, consultas.

Every route here requires a valid Bearer token.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from auth.dependencies import db_session, get_current_user
from auth.password import hash_password
from database.helpers import (
    count_consultas,
    count_usuarios_for_medico,
    find_usuario_by_correo,
    medico_exists,
    normalize_email,
    paciente_exists,
)
from database.models import Consulta, Medico, Paciente, Usuario
from utils.schemas import (
    ConsultaResponse,
    CreateConsultaRequest,
    CreateMedicoRequest,
    CreatePacienteRequest,
    CreateUsuarioRequest,
    MedicoResponse,
    PacienteResponse,
    UsuarioResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


async def _flush_or_conflict(session: AsyncSession, detail: str) -> None:
    """Flush pending inserts; a unique-constraint race becomes a 409."""
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        logger.info("Insert rejected by constraint: %s", exc.orig)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


async def _get_or_404(session: AsyncSession, model, record_id: int, label: str):
    record = await session.get(model, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} {record_id} not found",
        )
    return record


# ── Usuarios ───────────────────────────────────────────────────────────


@router.get("/usuarios", response_model=List[UsuarioResponse], tags=["usuarios"])
async def list_usuarios(session: AsyncSession = Depends(db_session)):
    result = await session.execute(select(Usuario).order_by(Usuario.id))
    return result.scalars().all()


@router.get("/usuarios/{usuario_id}", response_model=UsuarioResponse, tags=["usuarios"])
async def get_usuario(usuario_id: int, session: AsyncSession = Depends(db_session)):
    return await _get_or_404(session, Usuario, usuario_id, "Usuario")


@router.post(
    "/usuarios",
    response_model=UsuarioResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["usuarios"],
)
async def create_usuario(
    req: CreateUsuarioRequest,
    session: AsyncSession = Depends(db_session),
):
    """Create a user account; the password is stored only as a credential hash."""
    correo = normalize_email(req.correo)
    if not correo or not req.password.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required.",
        )
    if await find_usuario_by_correo(session, correo) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    if req.medico_id is not None and not await medico_exists(session, req.medico_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Medico {req.medico_id} does not exist",
        )

    usuario = Usuario(
        correo=correo,
        password_hash=await run_in_threadpool(hash_password, req.password),
        nombre_completo=req.nombre_completo.strip(),
        medico_id=req.medico_id,
        activo=req.activo,
    )
    session.add(usuario)
    await _flush_or_conflict(session, "Email already registered")
    await session.refresh(usuario)
    logger.info("Created user %s (%s)", usuario.correo, usuario.id)
    return usuario


@router.delete(
    "/usuarios/{usuario_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["usuarios"],
)
async def delete_usuario(usuario_id: int, session: AsyncSession = Depends(db_session)):
    usuario = await _get_or_404(session, Usuario, usuario_id, "Usuario")
    await session.delete(usuario)
    logger.info("Deleted user %s", usuario_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Medicos ────────────────────────────────────────────────────────────


@router.get("/medicos", response_model=List[MedicoResponse], tags=["medicos"])
async def list_medicos(session: AsyncSession = Depends(db_session)):
    result = await session.execute(select(Medico).order_by(Medico.id))
    return result.scalars().all()


@router.get("/medicos/{medico_id}", response_model=MedicoResponse, tags=["medicos"])
async def get_medico(medico_id: int, session: AsyncSession = Depends(db_session)):
    return await _get_or_404(session, Medico, medico_id, "Medico")


@router.post(
    "/medicos",
    response_model=MedicoResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["medicos"],
)
async def create_medico(
    req: CreateMedicoRequest,
    session: AsyncSession = Depends(db_session),
):
    cedula = req.cedula.strip()
    existing = await session.execute(select(Medico).where(Medico.cedula == cedula))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cedula already registered",
        )

    medico = Medico(**req.model_dump(exclude={"cedula"}), cedula=cedula)
    session.add(medico)
    await _flush_or_conflict(session, "Cedula already registered")
    await session.refresh(medico)
    logger.info("Created medico %s", medico.id)
    return medico


@router.delete(
    "/medicos/{medico_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["medicos"],
)
async def delete_medico(medico_id: int, session: AsyncSession = Depends(db_session)):
    medico = await _get_or_404(session, Medico, medico_id, "Medico")
    if await count_consultas(session, medico_id=medico_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Medico has consultations",
        )
    if await count_usuarios_for_medico(session, medico_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Medico is linked to user accounts",
        )
    await session.delete(medico)
    logger.info("Deleted medico %s", medico_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Pacientes ──────────────────────────────────────────────────────────


@router.get("/pacientes", response_model=List[PacienteResponse], tags=["pacientes"])
async def list_pacientes(session: AsyncSession = Depends(db_session)):
    result = await session.execute(select(Paciente).order_by(Paciente.id))
    return result.scalars().all()


@router.get("/pacientes/{paciente_id}", response_model=PacienteResponse, tags=["pacientes"])
async def get_paciente(paciente_id: int, session: AsyncSession = Depends(db_session)):
    return await _get_or_404(session, Paciente, paciente_id, "Paciente")


@router.post(
    "/pacientes",
    response_model=PacienteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["pacientes"],
)
async def create_paciente(
    req: CreatePacienteRequest,
    session: AsyncSession = Depends(db_session),
):
    paciente = Paciente(**req.model_dump())
    session.add(paciente)
    await session.flush()
    await session.refresh(paciente)
    logger.info("Created paciente %s", paciente.id)
    return paciente


@router.delete(
    "/pacientes/{paciente_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["pacientes"],
)
async def delete_paciente(paciente_id: int, session: AsyncSession = Depends(db_session)):
    paciente = await _get_or_404(session, Paciente, paciente_id, "Paciente")
    if await count_consultas(session, paciente_id=paciente_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Paciente has consultations",
        )
    await session.delete(paciente)
    logger.info("Deleted paciente %s", paciente_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Consultas ──────────────────────────────────────────────────────────


@router.get("/consultas", response_model=List[ConsultaResponse], tags=["consultas"])
async def list_consultas(
    medico_id: Optional[int] = Query(None, alias="medicoId"),
    paciente_id: Optional[int] = Query(None, alias="pacienteId"),
    session: AsyncSession = Depends(db_session),
):
    stmt = select(Consulta).order_by(Consulta.fecha_consulta.desc(), Consulta.id)
    if medico_id is not None:
        stmt = stmt.where(Consulta.medico_id == medico_id)
    if paciente_id is not None:
        stmt = stmt.where(Consulta.paciente_id == paciente_id)
    result = await session.execute(stmt)
    return result.scalars().all()


@router.get("/consultas/{consulta_id}", response_model=ConsultaResponse, tags=["consultas"])
async def get_consulta(consulta_id: int, session: AsyncSession = Depends(db_session)):
    return await _get_or_404(session, Consulta, consulta_id, "Consulta")


@router.post(
    "/consultas",
    response_model=ConsultaResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["consultas"],
)
async def create_consulta(
    req: CreateConsultaRequest,
    session: AsyncSession = Depends(db_session),
):
    if not await medico_exists(session, req.medico_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Medico {req.medico_id} does not exist",
        )
    if not await paciente_exists(session, req.paciente_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Paciente {req.paciente_id} does not exist",
        )

    consulta = Consulta(**req.model_dump())
    session.add(consulta)
    await session.flush()
    await session.refresh(consulta)
    logger.info("Created consulta %s (medico=%s, paciente=%s)", consulta.id, req.medico_id, req.paciente_id)
    return consulta


@router.delete(
    "/consultas/{consulta_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["consultas"],
)
async def delete_consulta(consulta_id: int, session: AsyncSession = Depends(db_session)):
    consulta = await _get_or_404(session, Consulta, consulta_id, "Consulta")
    await session.delete(consulta)
    logger.info("Deleted consulta %s", consulta_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
