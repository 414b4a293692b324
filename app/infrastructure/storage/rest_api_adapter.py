# app/infrastructure/storage/rest_api_adapter.py
import json
import logging
import requests

import config
from app.domain.errors import LoadError, PersistenceError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage
from .local_file_adapter import LocalFileStorage


class RestApiStorage(StateStorage):
    """
    Adaptador para una API REST que expone el documento completo
    (GET para leer, POST para sobrescribir), como la función serverless
    del panel web. Mantiene además una copia local que se escribe antes de
    cada envío y sirve de respaldo si el servidor no responde al cargar.
    """
    def __init__(self, base_url: str = None, cache_path: str = None, session: requests.Session = None, timeout: float = None):
        self.base_url = base_url or config.REST_API_URL
        if not self.base_url:
            raise ValueError("Falta la variable de entorno REST_API_URL para el almacenamiento REST.")
        self.cache = LocalFileStorage(cache_path or config.REST_CACHE_FILE)
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.STORAGE_TIMEOUT

    def load(self) -> FullState:
        try:
            response = self.session.get(self.base_url, timeout=self.timeout)
            response.raise_for_status()
            state = FullState.from_document(response.json())
        except (requests.exceptions.RequestException, ValueError) as e:
            if self.cache.exists():
                logging.warning(f"No se pudo leer {self.base_url} ({e}). Se usa la copia local '{self.cache.path}'.")
                return self.cache.load()
            raise LoadError(f"No se pudieron cargar los datos del servidor: {e}", e) from e

        try:
            self.cache.save(state)
        except PersistenceError:
            logging.warning("No se pudo actualizar la copia local tras la carga.", exc_info=True)
        return state

    def save(self, state: FullState) -> None:
        # La copia local va primero: los datos del usuario no dependen del servidor
        self.cache.save(state)
        body = json.dumps(state.to_document(), indent=2, ensure_ascii=False)
        try:
            response = self.session.post(
                self.base_url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            detail = e.response.text if e.response is not None else str(e)
            raise PersistenceError(f"Error al guardar los datos en el servidor: {detail}", e) from e
        logging.info(f"Datos guardados en {self.base_url}.")
