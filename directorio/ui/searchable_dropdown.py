"""Desplegable con búsqueda por nombre de pila."""

from __future__ import annotations

from typing import Sequence

from PyQt6.QtCore import QEvent, QObject, QSize, Qt, pyqtSignal
from PyQt6.QtGui import QIcon, QKeyEvent, QMouseEvent, QPixmap
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from directorio.core.debounce import Scheduler
from directorio.core.selector import DEBOUNCE_MS, DropdownController, Tecla
from directorio.models.user import UserRecord
from directorio.ui.qt_scheduler import QtScheduler
from directorio.ui.workers import ImageLoader

_TECLAS = {
    Qt.Key.Key_Down.value: Tecla.ABAJO,
    Qt.Key.Key_Up.value: Tecla.ARRIBA,
    Qt.Key.Key_Return.value: Tecla.ENTER,
    Qt.Key.Key_Enter.value: Tecla.ENTER,
    Qt.Key.Key_Escape.value: Tecla.ESCAPE,
}


class SearchableDropdown(QWidget):
    """Campo de búsqueda con lista desplegable navegable por teclado."""

    user_selected = pyqtSignal(object)

    THUMBNAIL_SIZE = 40

    def __init__(
        self,
        usuarios: Sequence[UserRecord] = (),
        *,
        scheduler: Scheduler | None = None,
        image_loader: ImageLoader | None = None,
        debounce_ms: int = DEBOUNCE_MS,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._image_loader = image_loader
        self._ids_renderizados: list[str] = []

        self._controller = DropdownController(
            usuarios,
            on_select=self.user_selected.emit,
            scheduler=scheduler or QtScheduler(self),
            debounce_ms=debounce_ms,
        )
        self._controller.al_cambiar = self._render
        self._controller.al_mover_activo = self._scroll_to_row

        self._build_ui()
        self._connect_signals()
        self._render()

    @property
    def controller(self) -> DropdownController:
        return self._controller

    def establecer_usuarios(self, usuarios: Sequence[UserRecord]) -> None:
        self._controller.establecer_usuarios(usuarios)

    # ------------------------------------------------------------------ UI
    def _build_ui(self) -> None:
        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search users by first name...")

        self.toggle_button = QToolButton()
        self.toggle_button.setArrowType(Qt.ArrowType.DownArrow)
        self.toggle_button.setFocusPolicy(Qt.FocusPolicy.NoFocus)

        input_row = QHBoxLayout()
        input_row.setContentsMargins(0, 0, 0, 0)
        input_row.setSpacing(4)
        input_row.addWidget(self.search_box, 1)
        input_row.addWidget(self.toggle_button)

        self.lbl_count = QLabel()
        self.lbl_count.setObjectName("countLabel")
        self.lbl_searching = QLabel("Searching...")
        self.lbl_searching.setObjectName("searchingLabel")

        header = QHBoxLayout()
        header.setContentsMargins(8, 4, 8, 4)
        header.addWidget(self.lbl_count)
        header.addStretch(1)
        header.addWidget(self.lbl_searching)

        self.list_widget = QListWidget()
        self.list_widget.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.list_widget.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.list_widget.setIconSize(QSize(self.THUMBNAIL_SIZE, self.THUMBNAIL_SIZE))
        self.list_widget.setMaximumHeight(320)

        self.lbl_empty = QLabel("No users found")
        self.lbl_empty.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.panel = QFrame()
        self.panel.setObjectName("dropdownPanel")
        panel_layout = QVBoxLayout(self.panel)
        panel_layout.setContentsMargins(0, 0, 0, 0)
        panel_layout.setSpacing(0)
        panel_layout.addLayout(header)
        panel_layout.addWidget(self.list_widget)
        panel_layout.addWidget(self.lbl_empty)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)
        layout.addLayout(input_row)
        layout.addWidget(self.panel)

        self._apply_styles()

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QLineEdit {
                border: 1px solid #d1d5db;
                border-radius: 8px;
                padding: 8px 10px;
                background: #fff;
                color: #1f2937;
            }
            QLineEdit:focus {
                border: 2px solid #3b82f6;
            }
            #dropdownPanel {
                background: #fff;
                border: 1px solid #e5e7eb;
                border-radius: 8px;
            }
            #countLabel {
                color: #6b7280;
                font-weight: 600;
            }
            #searchingLabel {
                color: #3b82f6;
            }
            QListWidget {
                border: none;
            }
            QListWidget::item:selected {
                background: #eff6ff;
                color: #1d4ed8;
            }
            """
        )

    def _connect_signals(self) -> None:
        self.search_box.textEdited.connect(self._controller.cambiar_consulta)
        self.toggle_button.clicked.connect(self._controller.alternar)
        self.list_widget.itemClicked.connect(self._on_item_clicked)
        self.search_box.installEventFilter(self)
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)
        if self._image_loader is not None:
            self._image_loader.loaded.connect(self._on_image_loaded)

    # ------------------------------------------------------------ eventos
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.search_box:
            if event.type() == QEvent.Type.FocusIn:
                self._controller.enfocar()
            elif event.type() == QEvent.Type.MouseButtonPress:
                self._controller.pulsar_entrada()
            elif event.type() == QEvent.Type.KeyPress and isinstance(event, QKeyEvent):
                tecla = _TECLAS.get(event.key())
                if tecla is not None and self._controller.tecla(tecla):
                    return True
        elif (
            event.type() == QEvent.Type.MouseButtonPress
            and isinstance(obj, QWidget)
            and isinstance(event, QMouseEvent)
            and not self._contiene_punto(event)
        ):
            self._controller.pulsar_fuera()
        return super().eventFilter(obj, event)

    def _contiene_punto(self, event: QMouseEvent) -> bool:
        if not self.isVisible():
            return False
        local = self.mapFromGlobal(event.globalPosition().toPoint())
        return self.rect().contains(local)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        usuario = item.data(Qt.ItemDataRole.UserRole)
        if isinstance(usuario, UserRecord):
            self._controller.seleccionar(usuario)

    def _on_image_loaded(self, url: str, data: bytes) -> None:
        icon = self._icon_from_bytes(data)
        if icon is None:
            return
        for row in range(self.list_widget.count()):
            item = self.list_widget.item(row)
            usuario: UserRecord = item.data(Qt.ItemDataRole.UserRole)
            if usuario.miniatura == url:
                item.setIcon(icon)

    # --------------------------------------------------------- renderizado
    def _render(self) -> None:
        c = self._controller
        if self.search_box.text() != c.consulta:
            self.search_box.setText(c.consulta)

        total = len(c.filtrados)
        self.lbl_count.setText(f"{total} {'user' if total == 1 else 'users'} found")
        self.lbl_searching.setHidden(not c.buscando)

        ids = [usuario.id for usuario in c.filtrados]
        if ids != self._ids_renderizados:
            self._populate_list(c.filtrados)
            self._ids_renderizados = ids

        self.list_widget.setHidden(total == 0)
        self.lbl_empty.setHidden(total != 0)
        self.list_widget.setCurrentRow(c.indice_activo)
        self.panel.setHidden(not c.abierto)

    def _populate_list(self, usuarios: Sequence[UserRecord]) -> None:
        self.list_widget.clear()
        for usuario in usuarios:
            item = QListWidgetItem(usuario.nombre_completo)
            item.setData(Qt.ItemDataRole.UserRole, usuario)
            if self._image_loader is not None:
                data = self._image_loader.cached(usuario.miniatura)
                icon = self._icon_from_bytes(data) if data is not None else None
                if icon is not None:
                    item.setIcon(icon)
                else:
                    self._image_loader.request(usuario.miniatura)
            self.list_widget.addItem(item)

    def _scroll_to_row(self, row: int) -> None:
        item = self.list_widget.item(row)
        if item is not None:
            self.list_widget.scrollToItem(item, QAbstractItemView.ScrollHint.EnsureVisible)

    def _icon_from_bytes(self, data: bytes) -> QIcon | None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            return None
        return QIcon(
            pixmap.scaled(
                self.THUMBNAIL_SIZE,
                self.THUMBNAIL_SIZE,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        )


__all__ = ["SearchableDropdown"]
