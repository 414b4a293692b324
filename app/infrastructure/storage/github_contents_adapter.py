# app/infrastructure/storage/github_contents_adapter.py
import os
import json
import base64
import logging
import requests
from typing import Optional

import config
from app.domain.errors import LoadError, PersistenceError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage


class GitHubContentsStorage(StateStorage):
    """
    Guarda el estado como `database.json` dentro de un repositorio de GitHub
    usando la API de contenidos. Cada guardado es un commit que sobrescribe
    el archivo completo; GitHub exige el `sha` vigente para actualizarlo.
    """
    def __init__(
        self,
        repo: str = None,
        token: str = None,
        path: str = None,
        committer_name: str = None,
        committer_email: str = None,
        session: requests.Session = None,
        timeout: float = None,
    ):
        self.repo = repo or os.getenv("GITHUB_REPO")
        self.token = token or os.getenv("GITHUB_PAT")
        self.path = path or config.GITHUB_DB_PATH
        self.committer_name = committer_name or os.getenv("GITHUB_USER")
        self.committer_email = committer_email or os.getenv("GITHUB_EMAIL")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.STORAGE_TIMEOUT

        if not all([self.repo, self.token]):
            raise ValueError("Faltan variables de entorno para GitHub (GITHUB_REPO, GITHUB_PAT)")

        self.api_url = f"{config.GITHUB_API_URL}/repos/{self.repo}/contents/{self.path}"

    def _headers(self) -> dict:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def _get_file(self) -> Optional[dict]:
        """Metadatos y contenido del archivo; None si todavía no existe."""
        response = self.session.get(self.api_url, headers=self._headers(), timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def load(self) -> FullState:
        try:
            file_data = self._get_file()
            if file_data is None:
                raise LoadError(f"No existe '{self.path}' en el repositorio {self.repo}.")
            content = base64.b64decode(file_data["content"]).decode("utf-8")
            return FullState.from_document(json.loads(content))
        except LoadError:
            raise
        except (requests.exceptions.RequestException, KeyError, ValueError) as e:
            raise LoadError(f"No se pudo leer '{self.path}' desde GitHub: {e}", e) from e

    def save(self, state: FullState) -> None:
        try:
            # 1. Obtener el SHA actual del archivo (necesario para actualizarlo)
            current = self._get_file()
            # 2. Preparar el nuevo contenido, legible en GitHub
            content = json.dumps(state.to_document(), indent=2, ensure_ascii=False)
            body = {
                "message": config.GITHUB_COMMIT_MESSAGE,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            }
            if current is not None:
                body["sha"] = current["sha"]
            if self.committer_name and self.committer_email:
                body["committer"] = {"name": self.committer_name, "email": self.committer_email}

            # 3. Enviar la actualización
            response = self.session.put(self.api_url, headers=self._headers(), json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            error_text = e.response.text if e.response is not None else str(e)
            if e.response is not None and e.response.status_code == 409:
                raise PersistenceError(f"Conflicto: '{self.path}' cambió durante el guardado. {error_text}", e) from e
            raise PersistenceError(f"Error de GitHub al guardar: {error_text}", e) from e
        except (requests.exceptions.RequestException, KeyError, ValueError) as e:
            raise PersistenceError(f"No se pudo guardar '{self.path}' en GitHub: {e}", e) from e
        logging.info(f"'{self.path}' actualizado en {self.repo}.")
