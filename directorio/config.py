"""Parámetros de configuración de la aplicación.

Los valores por defecto apuntan al API público de usuarios aleatorios; cada
uno puede sobrescribirse con una variable de entorno ``DIRECTORIO_*``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

_PREFIJO = "DIRECTORIO_"


@dataclass(frozen=True, slots=True)
class AppConfig:
    api_url: str = "https://randomuser.me/api/"
    resultados: int = 100
    timeout: float = 15.0
    debounce_ms: int = 300
    nivel_log: str = "INFO"

    @classmethod
    def desde_entorno(cls, entorno: Mapping[str, str] | None = None) -> "AppConfig":
        """Crea la configuración leyendo las variables ``DIRECTORIO_*``."""

        entorno = os.environ if entorno is None else entorno
        base = cls()

        def _leer(nombre: str, conversor, defecto):
            crudo = entorno.get(_PREFIJO + nombre)
            if crudo is None or not crudo.strip():
                return defecto
            try:
                return conversor(crudo.strip())
            except ValueError as exc:
                raise ValueError(
                    f"Valor inválido para {_PREFIJO}{nombre}: {crudo!r}"
                ) from exc

        config = cls(
            api_url=_leer("API_URL", str, base.api_url),
            resultados=_leer("RESULTADOS", int, base.resultados),
            timeout=_leer("TIMEOUT", float, base.timeout),
            debounce_ms=_leer("DEBOUNCE_MS", int, base.debounce_ms),
            nivel_log=_leer("LOG_LEVEL", str.upper, base.nivel_log),
        )
        if config.resultados <= 0:
            raise ValueError(f"{_PREFIJO}RESULTADOS debe ser positivo")
        if config.debounce_ms < 0:
            raise ValueError(f"{_PREFIJO}DEBOUNCE_MS no puede ser negativo")
        return config


__all__ = ["AppConfig"]
