import logging
import threading
import time

import pytest

from PyQt6.QtCore import Qt
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QPushButton, QVBoxLayout, QWidget

from directorio.core.details import PLACEHOLDER_SUBTITULO, PLACEHOLDER_TITULO
from directorio.core.errors import FetchFailed, RequestFailed
from directorio.core.state import AppState
from directorio.infrastructure.api_client import APIClient
from directorio.models.user import UserRecord
from directorio.ui.main_window import MainWindow
from directorio.ui.searchable_dropdown import SearchableDropdown
from directorio.ui.user_details import UserDetailsPanel
from directorio.ui.workers import ImageLoader, esperar_hilos_pendientes

from conftest import NOMBRES, usuario_api


class _FakeService:
    def __init__(self, usuarios=None, error=None):
        self.usuarios = usuarios or []
        self.error = error

    def obtener_todos(self):
        if self.error is not None:
            raise self.error
        return self.usuarios

    def descargar_imagen(self, url):
        return b""


@pytest.fixture
def dropdown(qapp, usuarios, scheduler):
    ventana = QWidget()
    layout = QVBoxLayout(ventana)
    widget = SearchableDropdown(usuarios, scheduler=scheduler)
    fuera = QPushButton("fuera")
    layout.addWidget(widget)
    layout.addWidget(fuera)
    ventana.show()
    seleccionados = []
    widget.user_selected.connect(seleccionados.append)
    yield widget, fuera, seleccionados
    ventana.close()
    ventana.deleteLater()


# ---------------------------------------------------------------- dropdown


def test_dropdown_empieza_cerrado(dropdown, usuarios):
    widget, _, _ = dropdown

    assert widget.panel.isHidden()
    assert widget.list_widget.count() == len(usuarios)
    assert widget.search_box.placeholderText() == "Search users by first name..."


def test_escribir_y_filtrar(dropdown, scheduler):
    widget, _, _ = dropdown

    QTest.keyClicks(widget.search_box, "An")

    assert widget.search_box.text() == "An"
    assert not widget.lbl_searching.isHidden()
    assert widget.list_widget.count() == len(NOMBRES)

    scheduler.avanzar(300)

    assert widget.lbl_searching.isHidden()
    nombres = [widget.list_widget.item(i).text() for i in range(widget.list_widget.count())]
    assert nombres == ["Anna Doe", "Andrew Doe", "diana Doe", "Ethan Doe", "Jan Doe"]
    assert widget.lbl_count.text() == "5 users found"


def test_sin_resultados(dropdown, scheduler):
    widget, _, _ = dropdown

    QTest.keyClicks(widget.search_box, "qqq")
    scheduler.avanzar(300)

    assert widget.list_widget.isHidden()
    assert not widget.lbl_empty.isHidden()
    assert widget.lbl_empty.text() == "No users found"
    assert widget.lbl_count.text() == "0 users found"


def test_contador_en_singular(dropdown, scheduler):
    widget, _, _ = dropdown

    QTest.keyClicks(widget.search_box, "zo")
    scheduler.avanzar(300)

    assert widget.lbl_count.text() == "1 user found"


def test_clic_en_entrada_y_clic_fuera(dropdown):
    widget, fuera, _ = dropdown

    QTest.mouseClick(widget.search_box, Qt.MouseButton.LeftButton)
    assert not widget.panel.isHidden()

    QTest.mouseClick(fuera, Qt.MouseButton.LeftButton)
    assert widget.panel.isHidden()


def test_boton_alterna_lista(dropdown):
    widget, _, _ = dropdown

    QTest.mouseClick(widget.toggle_button, Qt.MouseButton.LeftButton)
    assert widget.controller.abierto
    assert not widget.panel.isHidden()

    QTest.mouseClick(widget.toggle_button, Qt.MouseButton.LeftButton)
    assert not widget.controller.abierto
    assert widget.panel.isHidden()


def test_teclado_abajo_tres_veces_enter(dropdown, usuarios):
    widget, _, seleccionados = dropdown
    widget.controller.pulsar_entrada()

    for _ in range(3):
        QTest.keyClick(widget.search_box, Qt.Key.Key_Down)
    assert widget.list_widget.currentRow() == 2

    QTest.keyClick(widget.search_box, Qt.Key.Key_Return)

    assert seleccionados == [usuarios[2]]
    assert widget.panel.isHidden()
    assert widget.search_box.text() == ""


def test_flecha_abajo_abre_lista_cerrada(dropdown):
    widget, _, seleccionados = dropdown

    QTest.keyClick(widget.search_box, Qt.Key.Key_Down)

    assert not widget.panel.isHidden()
    assert widget.controller.indice_activo == -1
    assert seleccionados == []


def test_escape_cierra(dropdown):
    widget, _, seleccionados = dropdown
    widget.controller.pulsar_entrada()
    QTest.keyClick(widget.search_box, Qt.Key.Key_Down)

    QTest.keyClick(widget.search_box, Qt.Key.Key_Escape)

    assert widget.panel.isHidden()
    assert seleccionados == []


def test_clic_en_fila_selecciona(dropdown, usuarios, scheduler):
    widget, _, seleccionados = dropdown
    QTest.keyClicks(widget.search_box, "e")
    scheduler.avanzar(300)
    widget.controller.pulsar_entrada()

    item = widget.list_widget.item(1)
    rect = widget.list_widget.visualItemRect(item)
    QTest.mouseClick(
        widget.list_widget.viewport(), Qt.MouseButton.LeftButton, pos=rect.center()
    )

    assert seleccionados == [widget.controller.filtrados[1]]
    assert widget.panel.isHidden()
    assert widget.search_box.text() == ""


def test_fila_resaltada_visible_al_navegar(dropdown, usuarios, qapp):
    widget, _, _ = dropdown
    widget.list_widget.setFixedHeight(60)
    widget.controller.pulsar_entrada()
    qapp.processEvents()

    viewport = widget.list_widget.viewport().rect()
    ultimo = widget.list_widget.item(len(usuarios) - 1)
    assert not viewport.contains(widget.list_widget.visualItemRect(ultimo))

    for _ in range(len(usuarios)):
        QTest.keyClick(widget.search_box, Qt.Key.Key_Down)

    assert widget.list_widget.currentRow() == len(usuarios) - 1
    assert viewport.contains(widget.list_widget.visualItemRect(ultimo))

    for _ in range(len(usuarios)):
        QTest.keyClick(widget.search_box, Qt.Key.Key_Up)

    primero = widget.list_widget.item(0)
    assert viewport.contains(widget.list_widget.visualItemRect(primero))


def test_dropdown_sin_usuarios_no_abre_con_foco(qapp, scheduler):
    widget = SearchableDropdown([], scheduler=scheduler)
    widget.controller.enfocar()

    assert widget.panel.isHidden()
    widget.deleteLater()


# ------------------------------------------------------------------ detalle


def test_panel_sin_seleccion(qapp):
    panel = UserDetailsPanel()

    assert panel.currentWidget() is panel.placeholder
    assert panel.lbl_placeholder_title.text() == "Select a user to view details"
    assert panel.lbl_placeholder_title.text() == PLACEHOLDER_TITULO
    assert panel.lbl_placeholder_hint.text() == PLACEHOLDER_SUBTITULO


def test_panel_con_usuario(qapp, hacer_usuario):
    panel = UserDetailsPanel()
    usuario = hacer_usuario("Anna", "Smith", gender="male")

    panel.mostrar_usuario(usuario)

    assert panel.currentWidget() is panel.detail_page
    assert panel.lbl_name.text() == "Anna Smith"
    assert panel.lbl_gender.text() == "Male"
    assert 'href="mailto:anna.smith@example.com"' in panel.lbl_email.text()
    assert 'href="tel:555-0100"' in panel.lbl_phone.text()
    assert panel.lbl_country.text() == "Norway"

    panel.mostrar_usuario(None)
    assert panel.currentWidget() is panel.placeholder


# ------------------------------------------------------------------ imágenes


def test_image_loader_descarga_una_vez(qapp, esperar):
    descargas = []

    def _descargar(url):
        descargas.append(url)
        return b"bytes:" + url.encode()

    loader = ImageLoader(_descargar)
    recibidos = []
    loader.loaded.connect(lambda url, data: recibidos.append((url, data)))
    try:
        loader.request("https://img/a.jpg")
        loader.request("https://img/a.jpg")
        esperar(lambda: recibidos)

        loader.request("https://img/a.jpg")
        QTest.qWait(20)
    finally:
        loader.shutdown()

    assert descargas == ["https://img/a.jpg"]
    assert recibidos == [("https://img/a.jpg", b"bytes:https://img/a.jpg")]
    assert loader.cached("https://img/a.jpg") == b"bytes:https://img/a.jpg"


def test_image_loader_fallo_se_registra(qapp, esperar, caplog):
    intentos = []

    def _descargar(url):
        intentos.append(url)
        raise FetchFailed("404")

    loader = ImageLoader(_descargar)
    try:
        with caplog.at_level(logging.WARNING, logger="directorio.ui.workers"):
            loader.request("https://img/rota.jpg")
            esperar(lambda: any("rota.jpg" in r.getMessage() for r in caplog.records))
    finally:
        loader.shutdown()

    assert loader.cached("https://img/rota.jpg") is None
    assert intentos == ["https://img/rota.jpg"]


def test_image_loader_error_inesperado_no_aborta(qapp, esperar, caplog):
    def _descargar(url):
        raise RuntimeError("decodificación rota")

    loader = ImageLoader(_descargar)
    try:
        with caplog.at_level(logging.WARNING, logger="directorio.ui.workers"):
            loader.request("thumb.jpg")
            esperar(lambda: any("thumb.jpg" in r.getMessage() for r in caplog.records))

        # el hilo sigue atendiendo peticiones
        loader.request("thumb.jpg")
        esperar(lambda: len([r for r in caplog.records if "thumb.jpg" in r.getMessage()]) == 2)
    finally:
        loader.shutdown()

    assert loader.cached("thumb.jpg") is None


def test_image_loader_con_url_invalida_del_api(qapp, esperar, caplog):
    loader = ImageLoader(APIClient().descargar_imagen)
    try:
        with caplog.at_level(logging.WARNING, logger="directorio.ui.workers"):
            loader.request("thumb.jpg")
            esperar(lambda: any("thumb.jpg" in r.getMessage() for r in caplog.records))
    finally:
        loader.shutdown()

    assert loader.cached("thumb.jpg") is None


# ---------------------------------------------------------- ventana principal


def _ventana(servicio, scheduler, autoload=False):
    return MainWindow(
        state=AppState(),
        user_service=servicio,
        scheduler=scheduler,
        load_images=False,
        autoload=autoload,
    )


def test_ventana_muestra_carga_y_oculta_selector(qapp, scheduler):
    ventana = _ventana(_FakeService(), scheduler)

    assert ventana.state.cargando
    assert not ventana.loading_box.isHidden()
    assert ventana.content.isHidden()
    assert ventana.error_banner.isHidden()
    ventana.deleteLater()


def test_ventana_carga_exitosa(qapp, scheduler, usuarios):
    ventana = _ventana(_FakeService(usuarios), scheduler)

    ventana._on_fetch_completed(usuarios)

    assert not ventana.state.cargando
    assert ventana.loading_box.isHidden()
    assert not ventana.content.isHidden()
    assert ventana.dropdown.controller.usuarios == usuarios
    assert ventana.details.currentWidget() is ventana.details.placeholder
    ventana.deleteLater()


def test_ventana_error_de_carga(qapp, scheduler, caplog):
    ventana = _ventana(_FakeService(), scheduler)

    with caplog.at_level(logging.ERROR, logger="directorio.ui.main_window"):
        ventana._on_fetch_failed(RequestFailed(500))

    assert not ventana.state.cargando
    assert ventana.state.usuarios == []
    assert ventana.state.error == "Failed to fetch users. Please try again later."
    assert ventana.error_banner.text() == "Failed to fetch users. Please try again later."
    assert not ventana.error_banner.isHidden()
    assert any(r.exc_info and isinstance(r.exc_info[1], RequestFailed) for r in caplog.records)
    ventana.deleteLater()


def test_seleccion_actualiza_detalle(qapp, scheduler, usuarios):
    ventana = _ventana(_FakeService(usuarios), scheduler)
    ventana._on_fetch_completed(usuarios)

    ventana.dropdown.controller.seleccionar(usuarios[4])

    assert ventana.state.usuario_seleccionado is usuarios[4]
    assert ventana.details.currentWidget() is ventana.details.detail_page
    assert ventana.details.lbl_name.text() == usuarios[4].nombre_completo
    ventana.deleteLater()


def test_escenario_cien_usuarios_y_busqueda(qapp, scheduler, esperar):
    nombres = ["Anna", "Andrew", "Bruno", "Carla", "Joan", "Mike", "Olivia", "Stefan", "Lea", "Ian"]
    usuarios = [
        UserRecord.desde_api(usuario_api(nombres[i % len(nombres)], f"Apellido{i}", uuid=f"u{i}"))
        for i in range(100)
    ]
    ventana = _ventana(_FakeService(usuarios), scheduler, autoload=True)
    try:
        esperar(lambda: not ventana.state.cargando)
        assert len(ventana.state.usuarios) == 100

        ventana.dropdown.controller.cambiar_consulta("An")
        scheduler.avanzar(300)

        filtrados = ventana.dropdown.controller.filtrados
        assert {u.nombre for u in filtrados} == {"Anna", "Andrew", "Joan", "Stefan", "Ian"}
        assert all("an" in u.nombre.lower() for u in filtrados)
        assert filtrados == [u for u in usuarios if "an" in u.nombre.lower()]
    finally:
        ventana.close()
        ventana.deleteLater()


def test_escenario_error_500(qapp, scheduler, esperar):
    ventana = _ventana(_FakeService(error=RequestFailed(500)), scheduler, autoload=True)
    try:
        esperar(lambda: not ventana.state.cargando)

        assert ventana.state.usuarios == []
        assert ventana.state.error == "Failed to fetch users. Please try again later."
        assert ventana.dropdown.controller.usuarios == []
    finally:
        ventana.close()
        ventana.deleteLater()


def test_cierre_no_espera_a_la_carga_en_curso(qapp, scheduler, usuarios, caplog):
    liberar = threading.Event()

    class _ServicioLento(_FakeService):
        def obtener_todos(self):
            liberar.wait(10)
            return self.usuarios

    ventana = _ventana(_ServicioLento(usuarios), scheduler, autoload=True)
    try:
        inicio = time.monotonic()
        with caplog.at_level(logging.INFO, logger="directorio.ui.main_window"):
            ventana.close()
        assert time.monotonic() - inicio < 3
        assert any("sigue en curso" in r.getMessage() for r in caplog.records)
    finally:
        liberar.set()
        esperar_hilos_pendientes()

    QTest.qWait(50)
    assert ventana.state.cargando
    assert ventana.state.usuarios == []
    assert ventana.dropdown.controller.usuarios == []
    ventana.deleteLater()
