"""
Pydantic schemas for the Consultorio API.

Fields are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class LoginRequest(ApiModel):
    correo: str = Field(..., max_length=150)
    password: str = Field(..., max_length=128)


class UsuarioSummary(ApiModel):
    id: int
    correo: str
    nombre_completo: str
    medico_id: Optional[int] = None


class LoginResponse(ApiModel):
    token: str
    expiracion: datetime
    usuario: UsuarioSummary


# ═══════════════════════════════════════════════════════════════════════════════
# Usuarios
# ═══════════════════════════════════════════════════════════════════════════════


class CreateUsuarioRequest(ApiModel):
    correo: str = Field(..., min_length=3, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)
    nombre_completo: str = Field(..., min_length=1, max_length=200)
    medico_id: Optional[int] = None
    activo: bool = True


class UsuarioResponse(ApiModel):
    id: int
    correo: str
    nombre_completo: str
    medico_id: Optional[int] = None
    activo: bool
    fecha_creacion: Optional[datetime] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Medicos
# ═══════════════════════════════════════════════════════════════════════════════


class CreateMedicoRequest(ApiModel):
    primer_nombre: str = Field(..., min_length=1, max_length=100)
    segundo_nombre: Optional[str] = Field(None, max_length=100)
    apellido_paterno: str = Field(..., min_length=1, max_length=100)
    apellido_materno: Optional[str] = Field(None, max_length=100)
    cedula: str = Field(..., min_length=1, max_length=50)
    telefono: Optional[str] = Field(None, max_length=20)
    especialidad: Optional[str] = Field(None, max_length=150)
    email: Optional[str] = Field(None, max_length=150)
    activo: bool = True


class MedicoResponse(ApiModel):
    id: int
    primer_nombre: str
    segundo_nombre: Optional[str] = None
    apellido_paterno: str
    apellido_materno: Optional[str] = None
    cedula: str
    telefono: Optional[str] = None
    especialidad: Optional[str] = None
    email: Optional[str] = None
    activo: bool
    fecha_creacion: Optional[datetime] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Pacientes
# ═══════════════════════════════════════════════════════════════════════════════


class CreatePacienteRequest(ApiModel):
    primer_nombre: str = Field(..., min_length=1, max_length=100)
    segundo_nombre: Optional[str] = Field(None, max_length=100)
    apellido_paterno: str = Field(..., min_length=1, max_length=100)
    apellido_materno: Optional[str] = Field(None, max_length=100)
    telefono: Optional[str] = Field(None, max_length=20)
    activo: bool = True


class PacienteResponse(ApiModel):
    id: int
    primer_nombre: str
    segundo_nombre: Optional[str] = None
    apellido_paterno: str
    apellido_materno: Optional[str] = None
    telefono: Optional[str] = None
    activo: bool
    fecha_creacion: Optional[datetime] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Consultas
# ═══════════════════════════════════════════════════════════════════════════════


class CreateConsultaRequest(ApiModel):
    medico_id: int
    paciente_id: int
    fecha_consulta: datetime
    sintomas: Optional[str] = Field(None, max_length=500)
    recomendaciones: Optional[str] = Field(None, max_length=500)
    diagnostico: Optional[str] = Field(None, max_length=500)


class ConsultaResponse(ApiModel):
    id: int
    medico_id: int
    paciente_id: int
    fecha_consulta: datetime
    sintomas: Optional[str] = None
    recomendaciones: Optional[str] = None
    diagnostico: Optional[str] = None
