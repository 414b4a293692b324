from datetime import date

import pytest

from app.domain.errors import PersistenceError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage
from app.domain.state_store import StateStore

VALID_RUC = "20100055237"


class InMemoryStorage(StateStorage):
    """Almacenamiento de prueba: guarda documentos JSON en una lista."""

    def __init__(self, initial: FullState = None):
        self.documents = [initial.to_document()] if initial is not None else []
        self.fail_saves = False

    def load(self) -> FullState:
        if not self.documents:
            return FullState()
        return FullState.from_document(self.documents[-1])

    def save(self, state: FullState) -> None:
        if self.fail_saves:
            raise PersistenceError("servidor no disponible")
        self.documents.append(state.to_document())


@pytest.fixture
def invoice_form():
    return {
        "client_ruc": VALID_RUC,
        "client_name": "Distribuidora Andina S.A.C.",
        "description": "Instalación de cableado estructurado",
        "amount": "1000",
        "igv_rate": "18",
        "issue_date": "2026-10-01",
        "due_date": "2026-10-31",
    }


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def today():
    return date(2026, 10, 18)
