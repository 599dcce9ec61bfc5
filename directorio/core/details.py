"""Proyección de un usuario a los textos del panel de detalle."""

from __future__ import annotations

from dataclasses import dataclass

from directorio.models.user import UserRecord

PLACEHOLDER_TITULO = "Select a user to view details"
PLACEHOLDER_SUBTITULO = "Search and select a user from the dropdown"


@dataclass(frozen=True, slots=True)
class UserDetails:
    nombre: str
    apellido: str
    genero: str
    email: str
    enlace_email: str
    telefono: str
    enlace_telefono: str
    pais: str
    imagen: str

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}"


def describir_usuario(usuario: UserRecord | None) -> UserDetails | None:
    """Devuelve lo que el panel debe mostrar, o ``None`` si no hay selección."""

    if usuario is None:
        return None

    genero = usuario.genero[:1].upper() + usuario.genero[1:]
    return UserDetails(
        nombre=usuario.nombre,
        apellido=usuario.apellido,
        genero=genero,
        email=usuario.email,
        enlace_email=f"mailto:{usuario.email}",
        telefono=usuario.telefono,
        enlace_telefono=f"tel:{usuario.telefono}",
        pais=usuario.pais,
        imagen=usuario.imagen,
    )


__all__ = [
    "PLACEHOLDER_SUBTITULO",
    "PLACEHOLDER_TITULO",
    "UserDetails",
    "describir_usuario",
]
