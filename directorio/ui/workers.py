"""Trabajadores en segundo plano para las llamadas de red."""

from __future__ import annotations

import logging
from typing import Callable, List

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from directorio.core.errors import FetchFailed
from directorio.models.user import UserRecord

logger = logging.getLogger(__name__)


class UsersFetchWorker(QObject):
    """Ejecuta la carga inicial de usuarios fuera del hilo de la UI."""

    finished = pyqtSignal(list)
    error = pyqtSignal(object)

    def __init__(self, fetch: Callable[[], List[UserRecord]]) -> None:
        super().__init__()
        self._fetch = fetch

    def run(self) -> None:
        try:
            usuarios = self._fetch()
        except FetchFailed as exc:
            self.error.emit(exc)
            return
        except Exception as exc:  # pragma: no cover - fallo inesperado, se muestra en UI
            logger.exception("Error inesperado cargando usuarios")
            self.error.emit(FetchFailed(str(exc)))
            return
        self.finished.emit(usuarios)


class _ImageWorker(QObject):
    loaded = pyqtSignal(str, bytes)
    failed = pyqtSignal(str, str)

    def __init__(self, download: Callable[[str], bytes]) -> None:
        super().__init__()
        self._download = download

    @pyqtSlot(str)
    def fetch(self, url: str) -> None:
        try:
            data = self._download(url)
        except FetchFailed as exc:
            self.failed.emit(url, str(exc))
            return
        except Exception as exc:
            # una excepción que escapa de un slot aborta el proceso
            self.failed.emit(url, repr(exc))
            return
        self.loaded.emit(url, data)


_hilos_pendientes: list[QThread] = []


def retener_hasta_terminar(thread: QThread) -> None:
    """Conserva un hilo cuyo dueño ya se cerró hasta que termine su petición."""

    thread.setParent(None)
    _hilos_pendientes.append(thread)


def esperar_hilos_pendientes() -> None:
    while _hilos_pendientes:
        _hilos_pendientes.pop().wait()


class ImageLoader(QObject):
    """Descarga imágenes en un hilo dedicado y guarda los bytes por URL.

    Las peticiones se atienden en orden; una URL ya descargada o en curso no
    se vuelve a pedir.
    """

    loaded = pyqtSignal(str, bytes)
    _requested = pyqtSignal(str)

    def __init__(self, download: Callable[[str], bytes], parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cache: dict[str, bytes] = {}
        self._en_curso: set[str] = set()

        self._thread = QThread(self)
        self._worker = _ImageWorker(download)
        self._worker.moveToThread(self._thread)
        self._requested.connect(self._worker.fetch)
        self._worker.loaded.connect(self._on_loaded)
        self._worker.failed.connect(self._on_failed)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.start()

    def cached(self, url: str) -> bytes | None:
        return self._cache.get(url)

    def request(self, url: str) -> None:
        if not url or url in self._cache or url in self._en_curso:
            return
        self._en_curso.add(url)
        self._requested.emit(url)

    def shutdown(self) -> None:
        self._thread.quit()
        self._thread.wait()

    def _on_loaded(self, url: str, data: bytes) -> None:
        self._en_curso.discard(url)
        self._cache[url] = data
        self.loaded.emit(url, data)

    def _on_failed(self, url: str, message: str) -> None:
        self._en_curso.discard(url)
        logger.warning("No se pudo descargar la imagen %s: %s", url, message)


__all__ = [
    "ImageLoader",
    "UsersFetchWorker",
    "esperar_hilos_pendientes",
    "retener_hasta_terminar",
]
