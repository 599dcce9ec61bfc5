"""Errores de la capa de datos."""

from __future__ import annotations


class FetchFailed(Exception):
    """No se pudo obtener o interpretar la respuesta del servicio remoto."""


class RequestFailed(FetchFailed):
    """El servicio respondió con un estado HTTP distinto de 2xx."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"API request failed with status {status_code}")
        self.status_code = status_code


__all__ = ["FetchFailed", "RequestFailed"]
