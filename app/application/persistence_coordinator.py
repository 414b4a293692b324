# app/application/persistence_coordinator.py
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from app.domain.errors import PersistenceError
from app.domain.ports.state_storage import StateStorage
from app.domain.state_store import StateStore


class SaveOutcome(str, Enum):
    SAVED = "saved"
    QUEUED = "queued"      # Otro guardado está en curso y tomará este cambio
    FAILED = "failed"      # Queda pendiente para el siguiente reintento


class PersistenceCoordinator:
    """
    Fase de durabilidad del guardado optimista. Los cambios ya están en el
    `StateStore`; aquí se envía la foto completa al almacenamiento.

    Nunca hay más de un guardado en curso. Si llega una petición mientras
    otro guardado corre, se marca como pendiente y el guardado en curso
    vuelve a enviar la foto más reciente al terminar. Un fallo no revierte
    el estado local: queda pendiente para el guardado automático o para
    `retry_pending`.
    """
    def __init__(self, state_store: StateStore, storage: StateStorage):
        self.state_store = state_store
        self.storage = storage
        self._lock = threading.Lock()
        self._dirty = False
        self._in_flight = False
        self._failure_listeners: List[Callable[[PersistenceError], None]] = []
        self._auto_save_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.last_error: Optional[PersistenceError] = None
        self.last_saved_at: Optional[datetime] = None

    @property
    def has_pending(self) -> bool:
        return self._dirty

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def add_failure_listener(self, listener: Callable[[PersistenceError], None]) -> None:
        self._failure_listeners.append(listener)

    def persist(self) -> SaveOutcome:
        with self._lock:
            self._dirty = True
            if self._in_flight:
                logging.info("Guardado en curso; el cambio se enviará al terminar.")
                return SaveOutcome.QUEUED
            self._in_flight = True

        while True:
            with self._lock:
                self._dirty = False
            snapshot = self.state_store.snapshot()
            try:
                self.storage.save(snapshot)
            except Exception as e:
                error = e if isinstance(e, PersistenceError) else PersistenceError(f"Error inesperado al guardar: {e}", e)
                with self._lock:
                    self._dirty = True
                    self._in_flight = False
                    self.last_error = error
                logging.error(f"No se pudo guardar el estado; queda pendiente para reintento. {error}", exc_info=True)
                self._notify_failure(error)
                return SaveOutcome.FAILED

            with self._lock:
                self.last_saved_at = datetime.now(timezone.utc)
                self.last_error = None
                if not self._dirty:
                    self._in_flight = False
                    logging.info(f"Estado guardado ({len(snapshot.invoices)} facturas, correlativo {snapshot.invoice_counter}).")
                    return SaveOutcome.SAVED
            logging.info("Hubo cambios durante el guardado; se envía la foto más reciente.")

    def retry_pending(self) -> Optional[SaveOutcome]:
        """Reintenta el guardado si quedó algo pendiente. Retorna None si no había nada."""
        if not self._dirty:
            return None
        logging.info("Reintentando guardado pendiente...")
        return self.persist()

    def _notify_failure(self, error: PersistenceError) -> None:
        for listener in list(self._failure_listeners):
            try:
                listener(error)
            except Exception:
                logging.error("Un listener de fallos de guardado lanzó una excepción.", exc_info=True)

    # --- Guardado automático ---

    def start_auto_save(self, interval: float) -> None:
        if interval <= 0 or self._auto_save_thread is not None:
            return
        self._stop_event.clear()
        self._auto_save_thread = threading.Thread(
            target=self._auto_save_loop, args=(interval,), name="tecsitel-auto-save", daemon=True
        )
        self._auto_save_thread.start()
        logging.info(f"Guardado automático cada {interval:g} s.")

    def stop_auto_save(self, flush: bool = True) -> None:
        thread = self._auto_save_thread
        if thread is not None:
            self._stop_event.set()
            thread.join()
            self._auto_save_thread = None
        if flush:
            self.retry_pending()

    def _auto_save_loop(self, interval: float) -> None:
        while not self._stop_event.wait(interval):
            self.retry_pending()

    def status(self) -> dict:
        return {
            "pending": self._dirty,
            "in_flight": self._in_flight,
            "last_saved_at": self.last_saved_at.isoformat() if self.last_saved_at else None,
            "last_error": str(self.last_error) if self.last_error else None,
        }
