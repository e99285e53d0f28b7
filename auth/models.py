"""Identity types used by authentication, plus the ``Usuario`` model re-export.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from database.models import Usuario


@dataclass(frozen=True)
class Identity:
    """Authenticated principal as seen by the token issuer."""

    id: int
    correo: str
    nombre_completo: str
    medico_id: Optional[int] = None
    activo: bool = True

    @classmethod
    def from_usuario(cls, usuario: Usuario) -> "Identity":
        return cls(
            id=usuario.id,
            correo=usuario.correo,
            nombre_completo=usuario.nombre_completo,
            medico_id=usuario.medico_id,
            activo=bool(usuario.activo),
        )


@dataclass(frozen=True)
class CurrentUser:
    """Principal reconstructed from a validated bearer token."""

    id: int
    correo: str
    nombre_completo: str
    medico_id: Optional[int] = None


__all__ = ["CurrentUser", "Identity", "Usuario"]
