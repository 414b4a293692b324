# app/infrastructure/container.py
import logging

import config
from app.application.persistence_coordinator import PersistenceCoordinator
from app.application.use_cases.create_invoice import CreateInvoiceUseCase
from app.application.use_cases.load_state import LoadStateUseCase
from app.application.use_cases.update_invoice_status import UpdateInvoiceStatusUseCase
from app.domain.ports.state_storage import StateStorage
from app.domain.state_store import StateStore


def build_storage(backend: str = None) -> StateStorage:
    """Instancia el adaptador de almacenamiento indicado en STORAGE_BACKEND."""
    backend = (backend or config.STORAGE_BACKEND).strip().lower()
    logging.info(f"Almacenamiento seleccionado: {backend}")

    if backend == "local":
        from app.infrastructure.storage.local_file_adapter import LocalFileStorage
        return LocalFileStorage()
    if backend == "rest":
        from app.infrastructure.storage.rest_api_adapter import RestApiStorage
        return RestApiStorage()
    if backend == "github":
        from app.infrastructure.storage.github_contents_adapter import GitHubContentsStorage
        return GitHubContentsStorage()
    if backend == "sql":
        from app.infrastructure.persistence.sql_state_adapter import SQLStateStorage
        return SQLStateStorage()
    raise ValueError(f"STORAGE_BACKEND desconocido: '{backend}' (use local, rest, github o sql)")


class Container:
    """Arma el estado, el coordinador de guardado y los casos de uso sobre un almacenamiento."""
    def __init__(self, storage: StateStorage):
        self.storage = storage
        self.state_store = StateStore()
        self.persistence = PersistenceCoordinator(self.state_store, storage)
        self.load_state = LoadStateUseCase(self.state_store, storage)
        self.create_invoice = CreateInvoiceUseCase(self.state_store, self.persistence)
        self.update_invoice_status = UpdateInvoiceStatusUseCase(self.state_store, self.persistence)
