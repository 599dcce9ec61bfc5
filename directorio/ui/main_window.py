"""Ventana principal de la aplicación."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QThread
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QProgressBar,
    QVBoxLayout,
    QWidget,
)

from directorio.core.debounce import Scheduler
from directorio.core.errors import FetchFailed
from directorio.core.selector import DEBOUNCE_MS
from directorio.core.services import UserService
from directorio.core.state import AppState
from directorio.models.user import UserRecord
from directorio.ui.searchable_dropdown import SearchableDropdown
from directorio.ui.user_details import UserDetailsPanel
from directorio.ui.workers import ImageLoader, UsersFetchWorker, retener_hasta_terminar

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Directorio: buscador a la izquierda y ficha del usuario a la derecha."""

    CLOSE_WAIT_MS = 500

    def __init__(
        self,
        *,
        state: AppState,
        user_service: UserService,
        debounce_ms: int = DEBOUNCE_MS,
        scheduler: Scheduler | None = None,
        load_images: bool = True,
        autoload: bool = True,
    ) -> None:
        super().__init__()
        self.state = state
        self.user_service = user_service
        self._fetch_thread: QThread | None = None
        self._fetch_worker: UsersFetchWorker | None = None
        self._closing = False

        self._image_loader = (
            ImageLoader(self.user_service.descargar_imagen, self) if load_images else None
        )

        self.setWindowTitle("Random User Directory")
        self.resize(1100, 680)

        self._build_ui(debounce_ms, scheduler)
        self._apply_styles()
        self._render()

        if autoload:
            self._start_fetch()

    # ------------------------------------------------------------------ UI
    def _build_ui(self, debounce_ms: int, scheduler: Scheduler | None) -> None:
        title = QLabel("Random User Directory")
        title.setObjectName("titleLabel")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle = QLabel("Search and view details of users from our directory")
        subtitle.setObjectName("subtitleLabel")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.error_banner = QLabel()
        self.error_banner.setObjectName("errorBanner")
        self.error_banner.setWordWrap(True)

        self.loading_bar = QProgressBar()
        self.loading_bar.setRange(0, 0)
        self.loading_bar.setTextVisible(False)
        self.loading_label = QLabel("Loading users...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.loading_box = QWidget()
        loading_layout = QVBoxLayout(self.loading_box)
        loading_layout.addStretch(1)
        loading_layout.addWidget(self.loading_bar)
        loading_layout.addWidget(self.loading_label)
        loading_layout.addStretch(1)

        self.dropdown = SearchableDropdown(
            scheduler=scheduler,
            image_loader=self._image_loader,
            debounce_ms=debounce_ms,
        )
        self.dropdown.user_selected.connect(self._on_user_selected)

        search_title = QLabel("Find a User")
        search_title.setObjectName("cardTitle")
        hint = QLabel("Type to search by first name")
        hint.setObjectName("hintLabel")

        search_card = QFrame()
        search_card.setObjectName("card")
        search_layout = QVBoxLayout(search_card)
        search_layout.setContentsMargins(20, 20, 20, 20)
        search_layout.setSpacing(12)
        search_layout.addWidget(search_title)
        search_layout.addWidget(hint)
        search_layout.addWidget(self.dropdown)
        search_layout.addStretch(1)

        self.details = UserDetailsPanel(image_loader=self._image_loader)
        details_card = QFrame()
        details_card.setObjectName("card")
        details_layout = QVBoxLayout(details_card)
        details_layout.addWidget(self.details)

        self.content = QWidget()
        content_layout = QHBoxLayout(self.content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(24)
        content_layout.addWidget(search_card, 1)
        content_layout.addWidget(details_card, 2)

        layout = QVBoxLayout()
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(16)
        layout.addWidget(title)
        layout.addWidget(subtitle)
        layout.addWidget(self.error_banner)
        layout.addWidget(self.loading_box, 1)
        layout.addWidget(self.content, 1)

        container = QWidget()
        container.setLayout(layout)
        self.setCentralWidget(container)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QMainWindow {
                background-color: #f9fafb;
            }
            #titleLabel {
                font-size: 24pt;
                font-weight: 800;
                color: #1e3a8a;
            }
            #subtitleLabel {
                color: #4b5563;
                font-size: 11pt;
            }
            #errorBanner {
                background: #fef2f2;
                color: #b91c1c;
                border: 1px solid #fecaca;
                border-radius: 6px;
                padding: 10px;
                font-weight: 600;
            }
            #card {
                background: #fff;
                border: 1px solid #e5e7eb;
                border-radius: 12px;
            }
            #cardTitle {
                font-size: 14pt;
                font-weight: 700;
                color: #111827;
            }
            #hintLabel {
                background: #eff6ff;
                color: #1e40af;
                border: 1px solid #bfdbfe;
                border-radius: 6px;
                padding: 6px;
                font-weight: 600;
            }
            """
        )

    # ------------------------------------------------------------------
    # Eventos y acciones
    # ------------------------------------------------------------------
    def _start_fetch(self) -> None:
        """Lanza la única carga de usuarios en un hilo de trabajo."""

        self.state.iniciar_carga()
        self._render()

        self._fetch_thread = QThread(self)
        self._fetch_worker = UsersFetchWorker(self.user_service.obtener_todos)
        self._fetch_worker.moveToThread(self._fetch_thread)

        self._fetch_thread.started.connect(self._fetch_worker.run)
        self._fetch_worker.finished.connect(self._fetch_thread.quit)
        self._fetch_worker.error.connect(self._fetch_thread.quit)
        self._fetch_worker.finished.connect(self._on_fetch_completed)
        self._fetch_worker.error.connect(self._on_fetch_failed)
        self._fetch_thread.finished.connect(self._cleanup_fetch_thread)

        self._fetch_thread.start()

    def _on_fetch_completed(self, usuarios: list[UserRecord]) -> None:
        if self._closing:
            return
        self.state.actualizar_usuarios(usuarios)
        self.dropdown.establecer_usuarios(self.state.usuarios)
        self.details.mostrar_usuario(None)
        self._render()

    def _on_fetch_failed(self, exc: FetchFailed) -> None:
        if self._closing:
            return
        logger.error("Error fetching users", exc_info=exc)
        self.state.registrar_error()
        self.dropdown.establecer_usuarios(self.state.usuarios)
        self._render()

    def _cleanup_fetch_thread(self) -> None:
        if self._fetch_worker:
            self._fetch_worker.deleteLater()
            self._fetch_worker = None
        if self._fetch_thread:
            self._fetch_thread.deleteLater()
            self._fetch_thread = None

    def _on_user_selected(self, usuario: UserRecord) -> None:
        self.state.seleccionar_usuario(usuario)
        self.details.mostrar_usuario(self.state.usuario_seleccionado)

    def closeEvent(self, event) -> None:
        self._closing = True
        self.hide()
        self.dropdown.controller.cancelar_pendientes()
        if self._fetch_thread is not None:
            # la petición no se puede cancelar; su resultado se descarta
            self._fetch_thread.quit()
            if not self._fetch_thread.wait(self.CLOSE_WAIT_MS):
                logger.info("La carga de usuarios sigue en curso; se descartará al terminar")
                retener_hasta_terminar(self._fetch_thread)
                self._fetch_thread = None
        if self._image_loader is not None:
            self._image_loader.shutdown()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Renderizado
    # ------------------------------------------------------------------
    def _render(self) -> None:
        self.error_banner.setText(self.state.error or "")
        self.error_banner.setHidden(not self.state.error)
        self.loading_box.setHidden(not self.state.cargando)
        self.content.setHidden(self.state.cargando)


__all__ = ["MainWindow"]
