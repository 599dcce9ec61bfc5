"""Definiciones de modelos de dominio."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from directorio.core.errors import FetchFailed


def _campo(datos: Mapping[str, Any], ruta: str) -> str:
    """Lee un campo anidado (``"name.first"``) y exige que sea texto."""

    valor: Any = datos
    for clave in ruta.split("."):
        if not isinstance(valor, Mapping) or clave not in valor:
            raise FetchFailed(f"Falta el campo '{ruta}' en el usuario recibido")
        valor = valor[clave]
    if not isinstance(valor, str):
        raise FetchFailed(f"El campo '{ruta}' no es texto: {valor!r}")
    return valor


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Entrada del directorio tal como la entrega el API de usuarios aleatorios."""

    id: str
    nombre: str
    apellido: str
    genero: str
    email: str
    telefono: str
    pais: str
    miniatura: str
    imagen: str

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}"

    @classmethod
    def desde_api(cls, datos: Mapping[str, Any]) -> "UserRecord":
        """Construye el registro a partir de un objeto de ``results``.

        Lanza :class:`FetchFailed` si el objeto no tiene la forma esperada.
        """

        if not isinstance(datos, Mapping):
            raise FetchFailed(f"Usuario con formato inesperado: {type(datos).__name__}")

        return cls(
            id=_campo(datos, "login.uuid"),
            nombre=_campo(datos, "name.first"),
            apellido=_campo(datos, "name.last"),
            genero=_campo(datos, "gender"),
            email=_campo(datos, "email"),
            telefono=_campo(datos, "phone"),
            pais=_campo(datos, "location.country"),
            miniatura=_campo(datos, "picture.thumbnail"),
            imagen=_campo(datos, "picture.large"),
        )


__all__ = ["UserRecord"]
