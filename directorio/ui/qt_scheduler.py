"""Programador de llamadas diferidas sobre el bucle de eventos de Qt."""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import QObject, QTimer


class _QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()
        self._timer.deleteLater()


class QtScheduler:
    """Implementa ``llamar_despues`` con un ``QTimer`` de disparo único."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def llamar_despues(self, delay_ms: int, fn: Callable[[], None]) -> _QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(delay_ms)

        def _disparo() -> None:
            timer.deleteLater()
            fn()

        timer.timeout.connect(_disparo)
        timer.start()
        return _QtTimerHandle(timer)


__all__ = ["QtScheduler"]
