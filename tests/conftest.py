import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from directorio.models.user import UserRecord


class _FakeTimer:
    def __init__(self, vence, fn):
        self.vence = vence
        self.fn = fn
        self.cancelado = False
        self.ejecutado = False

    def cancel(self):
        self.cancelado = True


class FakeScheduler:
    """Reloj virtual en milisegundos para probar el debounce sin esperas reales."""

    def __init__(self):
        self.ahora = 0
        self._timers = []

    def llamar_despues(self, delay_ms, fn):
        timer = _FakeTimer(self.ahora + delay_ms, fn)
        self._timers.append(timer)
        return timer

    @property
    def pendientes(self):
        return [t for t in self._timers if not t.cancelado and not t.ejecutado]

    def avanzar(self, ms):
        objetivo = self.ahora + ms
        while True:
            vencidos = [t for t in self.pendientes if t.vence <= objetivo]
            if not vencidos:
                break
            timer = min(vencidos, key=lambda t: t.vence)
            self.ahora = timer.vence
            timer.ejecutado = True
            timer.fn()
        self.ahora = objetivo


def usuario_api(nombre, apellido="Doe", uuid=None, **extra):
    datos = {
        "gender": "female",
        "name": {"title": "Ms", "first": nombre, "last": apellido},
        "location": {"city": "Oslo", "country": "Norway"},
        "email": f"{nombre.lower()}.{apellido.lower()}@example.com",
        "login": {"uuid": uuid or f"uuid-{nombre.lower()}-{apellido.lower()}"},
        "phone": "555-0100",
        "picture": {
            "large": f"https://img.example.com/large/{nombre.lower()}.jpg",
            "medium": f"https://img.example.com/med/{nombre.lower()}.jpg",
            "thumbnail": f"https://img.example.com/thumb/{nombre.lower()}.jpg",
        },
    }
    datos.update(extra)
    return datos


NOMBRES = ["Anna", "Bruno", "Andrew", "Carla", "diana", "Ethan", "Jan", "Zoe"]


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def hacer_usuario():
    def _hacer(nombre, apellido="Doe", **extra):
        return UserRecord.desde_api(usuario_api(nombre, apellido, **extra))

    return _hacer


@pytest.fixture
def usuarios(hacer_usuario):
    return [hacer_usuario(nombre) for nombre in NOMBRES]


@pytest.fixture
def payload_api():
    return {"results": [usuario_api(nombre) for nombre in NOMBRES], "info": {"results": 8}}


@pytest.fixture
def esperar(qapp):
    def _esperar(condicion, timeout_ms=3000):
        restante = timeout_ms
        while not condicion():
            if restante <= 0:
                raise AssertionError("La condición no se cumplió a tiempo")
            QTest.qWait(10)
            restante -= 10

    return _esperar
