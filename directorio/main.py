"""Punto de entrada de la aplicación.

Crea los componentes de infraestructura, servicios y estado, y arranca la
interfaz gráfica principal.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from directorio.config import AppConfig
from directorio.core.services import UserService
from directorio.core.state import AppState
from directorio.infrastructure.api_client import APIClient
from directorio.infrastructure.repositories import UserRepository
from directorio.ui.main_window import MainWindow
from directorio.ui.workers import esperar_hilos_pendientes


def configurar_logging(nivel: str) -> None:
    logging.basicConfig(
        level=getattr(logging, nivel, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Arranca la aplicación PyQt6 con las dependencias configuradas."""

    config = AppConfig.desde_entorno()
    configurar_logging(config.nivel_log)

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    api_client = APIClient(
        api_url=config.api_url,
        resultados=config.resultados,
        timeout=config.timeout,
    )
    repository = UserRepository(api_client)
    user_service = UserService(repository)
    state = AppState()

    window = MainWindow(
        state=state,
        user_service=user_service,
        debounce_ms=config.debounce_ms,
    )
    window.show()

    codigo = app.exec()
    esperar_hilos_pendientes()
    sys.exit(codigo)


if __name__ == "__main__":  # pragma: no cover - punto de entrada interactivo
    main()
