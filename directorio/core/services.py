"""Servicios de aplicación que coordinan el acceso a datos."""

from __future__ import annotations

from typing import Sequence

from directorio.infrastructure.repositories import UserRepository
from directorio.models.user import UserRecord


def filtrar_por_nombre(usuarios: Sequence[UserRecord], consulta: str) -> list[UserRecord]:
    """Filtra usuarios cuyo nombre de pila contiene ``consulta``.

    La comparación ignora mayúsculas; los espacios de la consulta cuentan
    tal cual. Una consulta vacía o de solo espacios devuelve la lista
    completa. El orden original se conserva siempre.
    """

    if not consulta.strip():
        return list(usuarios)

    consulta_normalizada = consulta.casefold()

    return [
        usuario
        for usuario in usuarios
        if consulta_normalizada in usuario.nombre.casefold()
    ]


class UserService:
    """Orquesta el flujo de datos relacionado con usuarios."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def obtener_todos(self) -> list[UserRecord]:
        """Realiza la única consulta al API. Propaga :class:`FetchFailed`."""

        return self._repository.obtener_usuarios()

    def filtrar_por_nombre(
        self, usuarios: Sequence[UserRecord], consulta: str
    ) -> list[UserRecord]:
        return filtrar_por_nombre(usuarios, consulta)

    def descargar_imagen(self, url: str) -> bytes:
        return self._repository.descargar_imagen(url)


__all__ = ["UserService", "filtrar_por_nombre"]
