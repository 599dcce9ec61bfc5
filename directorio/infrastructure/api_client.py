"""Cliente HTTP para el API de usuarios aleatorios.

Cada método hace una única petición, sin reintentos ni caché. Cualquier
fallo (estado no 2xx, red, JSON inválido) se traduce a :class:`FetchFailed`.
"""

from __future__ import annotations

import json
import logging
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from directorio.core.errors import FetchFailed, RequestFailed

logger = logging.getLogger(__name__)


class APIClient:
    """Provee acceso a datos de usuarios."""

    DEFAULT_URL = "https://randomuser.me/api/"

    def __init__(
        self,
        api_url: str = DEFAULT_URL,
        resultados: int = 100,
        timeout: float = 15.0,
    ) -> None:
        self.api_url = api_url
        self.resultados = resultados
        self.timeout = timeout

    def _url_usuarios(self) -> str:
        separador = "&" if "?" in self.api_url else "?"
        return f"{self.api_url}{separador}{urlencode({'results': self.resultados})}"

    def _get(self, url: str, accept: str) -> bytes:
        try:
            request = Request(url, headers={"Accept": accept})
        except ValueError as exc:
            raise FetchFailed(f"URL inválida: {url!r}") from exc

        try:
            with urlopen(request, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise RequestFailed(status)
                return response.read()
        except HTTPError as exc:
            raise RequestFailed(exc.code) from exc
        except URLError as exc:
            raise FetchFailed(f"No se pudo conectar a {url}: {exc.reason}") from exc
        except OSError as exc:
            # timeouts de lectura y conexiones cortadas
            raise FetchFailed(f"Error de red al consultar {url}: {exc}") from exc
        except HTTPException as exc:
            raise FetchFailed(f"Respuesta HTTP incompleta o inválida de {url}: {exc!r}") from exc

    def obtener_usuarios(self) -> list[dict]:
        """Recupera el lote completo de usuarios del backend."""

        url = self._url_usuarios()
        logger.info("Solicitando %d usuarios a %s", self.resultados, url)
        raw = self._get(url, "application/json")

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FetchFailed(f"Respuesta del API no es JSON válido ({exc})") from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
            raise FetchFailed("Formato inesperado: falta la lista 'results'")

        resultados = payload["results"]
        logger.info("Recibidos %d usuarios", len(resultados))
        return resultados

    def descargar_imagen(self, url: str) -> bytes:
        """Descarga una imagen (miniatura o retrato) y devuelve sus bytes."""

        logger.debug("Descargando imagen %s", url)
        return self._get(url, "image/*")


__all__ = ["APIClient"]
