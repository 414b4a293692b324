# app/infrastructure/storage/local_file_adapter.py
import json
import logging
import os
import tempfile

import config
from app.domain.errors import LoadError, PersistenceError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage


class LocalFileStorage(StateStorage):
    """
    Guarda el estado como un JSON en disco. Si el archivo no existe aún se
    parte de un estado vacío (primera ejecución).
    """
    def __init__(self, path: str = None):
        self.path = path or config.LOCAL_STORAGE_FILE

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> FullState:
        if not self.exists():
            logging.info(f"No existe '{self.path}'. Se inicia con un estado vacío.")
            return FullState()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
            return FullState.from_document(document)
        except (OSError, ValueError) as e:
            raise LoadError(f"No se pudo leer '{self.path}': {e}", e) from e

    def save(self, state: FullState) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            # Se escribe a un temporal y se reemplaza, así nunca queda un JSON a medias
            fd, tmp_path = tempfile.mkstemp(prefix=".tecsitel-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(state.to_document(), f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"No se pudo escribir '{self.path}': {e}", e) from e
