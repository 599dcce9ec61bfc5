"""Debounce de cola ("trailing") independiente del bucle de eventos."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Programa una llamada única tras ``delay_ms`` milisegundos."""

    def llamar_despues(self, delay_ms: int, fn: Callable[[], None]) -> TimerHandle: ...


class Debouncer:
    """Ejecuta ``callback`` con el último valor recibido tras una pausa.

    Solo existe un temporizador pendiente a la vez: cada ``disparar`` cancela
    el anterior y vuelve a empezar la espera.
    """

    def __init__(
        self,
        delay_ms: int,
        callback: Callable[[Any], None],
        scheduler: Scheduler,
    ) -> None:
        self.delay_ms = delay_ms
        self._callback = callback
        self._scheduler = scheduler
        self._pendiente: TimerHandle | None = None

    @property
    def pendiente(self) -> bool:
        return self._pendiente is not None

    def disparar(self, valor: Any) -> None:
        self.cancelar()

        def _ejecutar() -> None:
            self._pendiente = None
            logger.debug("Debounce vencido, aplicando %r", valor)
            self._callback(valor)

        self._pendiente = self._scheduler.llamar_despues(self.delay_ms, _ejecutar)

    def cancelar(self) -> None:
        if self._pendiente is not None:
            self._pendiente.cancel()
            self._pendiente = None


__all__ = ["Debouncer", "Scheduler", "TimerHandle"]
