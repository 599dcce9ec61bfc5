"""Estado de la página principal."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from directorio.models.user import UserRecord

MENSAJE_ERROR_CARGA = "Failed to fetch users. Please try again later."


@dataclass
class AppState:
    """Mantiene los usuarios cargados, el estado de carga y la selección actual."""

    usuarios: List[UserRecord] = field(default_factory=list)
    cargando: bool = True
    error: str | None = None
    usuario_seleccionado: UserRecord | None = None

    def iniciar_carga(self) -> None:
        self.cargando = True
        self.error = None

    def actualizar_usuarios(self, usuarios: list[UserRecord]) -> None:
        self.usuarios = list(usuarios)
        self.usuario_seleccionado = None
        self.cargando = False

    def registrar_error(self) -> None:
        """Marca la carga como fallida; la lista queda vacía."""

        self.usuarios = []
        self.error = MENSAJE_ERROR_CARGA
        self.cargando = False

    def seleccionar_usuario(self, usuario: UserRecord | None) -> None:
        self.usuario_seleccionado = usuario


__all__ = ["AppState", "MENSAJE_ERROR_CARGA"]
