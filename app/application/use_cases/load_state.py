# app/application/use_cases/load_state.py
import logging

from app.domain.errors import LoadError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage
from app.domain.state_store import StateStore


class LoadStateUseCase:
    """
    Carga inicial del estado. Si falla no hay con qué trabajar, así que el
    error se propaga y el arranque se detiene.
    """
    def __init__(self, state_store: StateStore, storage: StateStorage):
        self.state_store = state_store
        self.storage = storage

    def execute(self) -> FullState:
        logging.info(f"Cargando estado desde {type(self.storage).__name__}...")
        try:
            state = self.storage.load()
        except LoadError:
            logging.error("No se pudo cargar el estado inicial.", exc_info=True)
            raise
        except Exception as e:
            logging.error("Error inesperado al cargar el estado inicial.", exc_info=True)
            raise LoadError(f"Error inesperado al cargar el estado: {e}", e) from e

        self.state_store.replace(state)
        logging.info(
            f"Estado cargado: {len(state.invoices)} facturas, {len(state.transactions)} transacciones, "
            f"siguiente correlativo {self.state_store.counter.value}."
        )
        return state
