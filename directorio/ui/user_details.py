"""Panel con los datos del usuario seleccionado."""

from __future__ import annotations

from html import escape

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import QFormLayout, QLabel, QStackedWidget, QVBoxLayout, QWidget

from directorio.core.details import (
    PLACEHOLDER_SUBTITULO,
    PLACEHOLDER_TITULO,
    UserDetails,
    describir_usuario,
)
from directorio.models.user import UserRecord
from directorio.ui.workers import ImageLoader


class UserDetailsPanel(QStackedWidget):
    """Muestra un aviso sin selección o la ficha del usuario elegido."""

    PORTRAIT_SIZE = 144

    def __init__(
        self,
        image_loader: ImageLoader | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._image_loader = image_loader
        self._detalles: UserDetails | None = None

        self._build_placeholder()
        self._build_detail_page()
        self._apply_styles()

        if self._image_loader is not None:
            self._image_loader.loaded.connect(self._on_image_loaded)

        self.mostrar_usuario(None)

    @property
    def detalles(self) -> UserDetails | None:
        return self._detalles

    def _build_placeholder(self) -> None:
        self.placeholder = QWidget()
        layout = QVBoxLayout(self.placeholder)
        layout.addStretch(1)
        self.lbl_placeholder_title = QLabel(PLACEHOLDER_TITULO)
        self.lbl_placeholder_title.setObjectName("placeholderTitle")
        self.lbl_placeholder_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.lbl_placeholder_hint = QLabel(PLACEHOLDER_SUBTITULO)
        self.lbl_placeholder_hint.setObjectName("placeholderHint")
        self.lbl_placeholder_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.lbl_placeholder_title)
        layout.addWidget(self.lbl_placeholder_hint)
        layout.addStretch(1)
        self.addWidget(self.placeholder)

    def _build_detail_page(self) -> None:
        self.detail_page = QWidget()

        self.lbl_portrait = QLabel()
        self.lbl_portrait.setFixedSize(self.PORTRAIT_SIZE, self.PORTRAIT_SIZE)
        self.lbl_portrait.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.lbl_portrait.setObjectName("portrait")

        self.lbl_name = QLabel()
        self.lbl_name.setObjectName("nameLabel")
        self.lbl_name.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.lbl_gender = QLabel()
        self.lbl_email = QLabel()
        self.lbl_phone = QLabel()
        self.lbl_country = QLabel()
        for enlace in (self.lbl_email, self.lbl_phone):
            enlace.setTextFormat(Qt.TextFormat.RichText)
            enlace.setOpenExternalLinks(True)
            enlace.setTextInteractionFlags(Qt.TextInteractionFlag.TextBrowserInteraction)

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        form.addRow("Gender", self.lbl_gender)
        form.addRow("Email", self.lbl_email)
        form.addRow("Phone", self.lbl_phone)
        form.addRow("Country", self.lbl_country)

        layout = QVBoxLayout(self.detail_page)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)
        layout.addWidget(self.lbl_portrait, alignment=Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(self.lbl_name)
        layout.addLayout(form)
        layout.addStretch(1)
        self.addWidget(self.detail_page)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            #placeholderTitle {
                color: #6b7280;
                font-size: 13pt;
                font-weight: 600;
            }
            #placeholderHint {
                color: #9ca3af;
            }
            #portrait {
                background: #e0e7ff;
                border-radius: 72px;
            }
            #nameLabel {
                color: #1f2937;
                font-size: 18pt;
                font-weight: 700;
            }
            """
        )

    # ------------------------------------------------------------------
    def mostrar_usuario(self, usuario: UserRecord | None) -> None:
        """Vuelve a pintar el panel a partir de la selección actual."""

        self._detalles = describir_usuario(usuario)
        if self._detalles is None:
            self.setCurrentWidget(self.placeholder)
            return

        d = self._detalles
        self.lbl_name.setText(d.nombre_completo)
        self.lbl_gender.setText(d.genero)
        self.lbl_email.setText(f'<a href="{escape(d.enlace_email)}">{escape(d.email)}</a>')
        self.lbl_phone.setText(f'<a href="{escape(d.enlace_telefono)}">{escape(d.telefono)}</a>')
        self.lbl_country.setText(d.pais)
        self.lbl_portrait.clear()

        if self._image_loader is not None:
            data = self._image_loader.cached(d.imagen)
            if data is not None:
                self._set_portrait(data)
            else:
                self._image_loader.request(d.imagen)

        self.setCurrentWidget(self.detail_page)

    def _on_image_loaded(self, url: str, data: bytes) -> None:
        if self._detalles is not None and self._detalles.imagen == url:
            self._set_portrait(data)

    def _set_portrait(self, data: bytes) -> None:
        pixmap = QPixmap()
        if pixmap.loadFromData(data):
            self.lbl_portrait.setPixmap(
                pixmap.scaled(
                    self.PORTRAIT_SIZE,
                    self.PORTRAIT_SIZE,
                    Qt.AspectRatioMode.KeepAspectRatio,
                    Qt.TransformationMode.SmoothTransformation,
                )
            )


__all__ = ["UserDetailsPanel"]
