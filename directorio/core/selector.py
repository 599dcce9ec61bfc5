"""Máquina de estados del selector con búsqueda.

El widget Qt solo traduce eventos (teclas, foco, clics) a las transiciones
de :class:`DropdownController` y vuelve a pintar cuando éste avisa.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, List, Sequence

from directorio.core.debounce import Debouncer, Scheduler
from directorio.core.services import filtrar_por_nombre
from directorio.models.user import UserRecord

logger = logging.getLogger(__name__)

SIN_ACTIVO = -1
DEBOUNCE_MS = 300


class Tecla(enum.Enum):
    ABAJO = "down"
    ARRIBA = "up"
    ENTER = "enter"
    ESCAPE = "escape"


class DropdownController:
    """Estado del desplegable: consulta, lista filtrada, apertura e índice activo."""

    def __init__(
        self,
        usuarios: Sequence[UserRecord],
        on_select: Callable[[UserRecord], None],
        scheduler: Scheduler,
        debounce_ms: int = DEBOUNCE_MS,
    ) -> None:
        self._usuarios: List[UserRecord] = list(usuarios)
        self._on_select = on_select
        self.consulta = ""
        self.consulta_aplicada = ""
        self.abierto = False
        self.filtrados: List[UserRecord] = list(self._usuarios)
        self.indice_activo = SIN_ACTIVO

        self.al_cambiar: Callable[[], None] | None = None
        self.al_mover_activo: Callable[[int], None] | None = None

        self._debouncer = Debouncer(debounce_ms, self.aplicar_consulta, scheduler)

    # ------------------------------------------------------------------
    # Propiedades derivadas
    # ------------------------------------------------------------------
    @property
    def usuarios(self) -> List[UserRecord]:
        return self._usuarios

    @property
    def buscando(self) -> bool:
        return self.consulta != self.consulta_aplicada

    @property
    def usuario_activo(self) -> UserRecord | None:
        if 0 <= self.indice_activo < len(self.filtrados):
            return self.filtrados[self.indice_activo]
        return None

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------
    def establecer_usuarios(self, usuarios: Sequence[UserRecord]) -> None:
        self._usuarios = list(usuarios)
        self._recalcular()

    def cambiar_consulta(self, texto: str) -> None:
        """Actualiza la consulta visible y programa el filtrado."""

        self.consulta = texto
        self.indice_activo = SIN_ACTIVO
        self._debouncer.disparar(texto)
        self._notificar()

    def aplicar_consulta(self, texto: str) -> None:
        self.consulta_aplicada = texto
        self._recalcular()

    def enfocar(self) -> None:
        if self.filtrados:
            self._abrir(True)

    def pulsar_entrada(self) -> None:
        self._abrir(True)

    def alternar(self) -> None:
        self._abrir(not self.abierto)

    def pulsar_fuera(self) -> None:
        self._abrir(False)

    def tecla(self, tecla: Tecla) -> bool:
        """Aplica el contrato de teclado. Devuelve ``True`` si la tecla se consumió."""

        if not self.abierto:
            if tecla in (Tecla.ABAJO, Tecla.ENTER):
                self._abrir(True)
                return True
            return False

        ultimo = len(self.filtrados) - 1
        if tecla is Tecla.ABAJO:
            if self.indice_activo < ultimo:
                self._mover_activo(self.indice_activo + 1)
        elif tecla is Tecla.ARRIBA:
            # sin retorno circular; piso en 0 en cuanto hay elementos
            if ultimo >= 0:
                self._mover_activo(max(self.indice_activo - 1, 0))
        elif tecla is Tecla.ENTER:
            usuario = self.usuario_activo
            if usuario is not None:
                self.seleccionar(usuario)
        elif tecla is Tecla.ESCAPE:
            self._abrir(False)
        return True

    def seleccionar(self, usuario: UserRecord) -> None:
        logger.debug("Usuario seleccionado: %s", usuario.id)
        self._on_select(usuario)
        self.abierto = False
        self.consulta = ""
        self._notificar()

    def cancelar_pendientes(self) -> None:
        self._debouncer.cancelar()

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    def _recalcular(self) -> None:
        self.filtrados = filtrar_por_nombre(self._usuarios, self.consulta_aplicada)
        self.indice_activo = SIN_ACTIVO
        logger.debug(
            "Filtro %r: %d de %d usuarios",
            self.consulta_aplicada,
            len(self.filtrados),
            len(self._usuarios),
        )
        self._notificar()

    def _abrir(self, abierto: bool) -> None:
        if self.abierto == abierto:
            return
        self.abierto = abierto
        self._notificar()

    def _mover_activo(self, indice: int) -> None:
        if indice == self.indice_activo:
            return
        self.indice_activo = indice
        self._notificar()
        if self.al_mover_activo is not None:
            self.al_mover_activo(indice)

    def _notificar(self) -> None:
        if self.al_cambiar is not None:
            self.al_cambiar()


__all__ = ["DropdownController", "Tecla", "SIN_ACTIVO", "DEBOUNCE_MS"]
