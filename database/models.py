"""
SQLAlchemy ORM models for the clinic records.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Medico(Base):
    __tablename__ = "medicos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    primer_nombre = Column(String(100), nullable=False)
    segundo_nombre = Column(String(100))
    apellido_paterno = Column(String(100), nullable=False)
    apellido_materno = Column(String(100))
    cedula = Column(String(50), unique=True, nullable=False)
    telefono = Column(String(20))
    especialidad = Column(String(150))
    email = Column(String(150))
    activo = Column(Boolean, nullable=False, default=True)
    fecha_creacion = Column(DateTime(timezone=True), default=_utcnow)

    usuarios = relationship("Usuario", back_populates="medico")
    consultas = relationship("Consulta", back_populates="medico")


class Paciente(Base):
    __tablename__ = "pacientes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    primer_nombre = Column(String(100), nullable=False)
    segundo_nombre = Column(String(100))
    apellido_paterno = Column(String(100), nullable=False)
    apellido_materno = Column(String(100))
    telefono = Column(String(20))
    activo = Column(Boolean, nullable=False, default=True)
    fecha_creacion = Column(DateTime(timezone=True), default=_utcnow)

    consultas = relationship("Consulta", back_populates="paciente")


class Consulta(Base):
    __tablename__ = "consultas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    medico_id = Column("id_medico", Integer, ForeignKey("medicos.id"), nullable=False, index=True)
    paciente_id = Column("id_paciente", Integer, ForeignKey("pacientes.id"), nullable=False, index=True)
    fecha_consulta = Column(DateTime(timezone=True), nullable=False)
    sintomas = Column(String(500))
    recomendaciones = Column(String(500))
    diagnostico = Column(String(500))

    medico = relationship("Medico", back_populates="consultas")
    paciente = relationship("Paciente", back_populates="consultas")


class Usuario(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    correo = Column(String(150), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    nombre_completo = Column(String(200), nullable=False)
    medico_id = Column("id_medico", Integer, ForeignKey("medicos.id"), nullable=True)
    activo = Column(Boolean, nullable=False, default=True)
    fecha_creacion = Column(DateTime(timezone=True), default=_utcnow)

    medico = relationship("Medico", back_populates="usuarios")
