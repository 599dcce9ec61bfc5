"""Implementaciones de repositorios para acceso a datos."""

from __future__ import annotations

from directorio.infrastructure.api_client import APIClient
from directorio.models.user import UserRecord


class UserRepository:
    """Repositorio de usuarios basado en un cliente API."""

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    def obtener_usuarios(self) -> list[UserRecord]:
        """Devuelve la lista completa de usuarios en el orden recibido."""

        usuarios_crudos = self._api_client.obtener_usuarios()
        return [UserRecord.desde_api(datos) for datos in usuarios_crudos]

    def descargar_imagen(self, url: str) -> bytes:
        return self._api_client.descargar_imagen(url)


__all__ = ["UserRepository"]
