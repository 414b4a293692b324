# app/application/use_cases/update_invoice_status.py
from typing import Any, Callable, Optional, Union

from app.application.persistence_coordinator import PersistenceCoordinator
from app.domain.models.invoice import Invoice, InvoiceStatus
from app.domain.state_store import StateStore


class UpdateInvoiceStatusUseCase:
    """Cambia el estado de pago de una factura (p. ej. Pendiente -> Pagada)."""
    def __init__(self, state_store: StateStore, persistence: PersistenceCoordinator):
        self.state_store = state_store
        self.persistence = persistence

    def execute(
        self,
        invoice_id: Union[str, int],
        status: InvoiceStatus,
        schedule: Optional[Callable[[Callable[[], Any]], Any]] = None,
    ) -> Invoice:
        invoice = self.state_store.set_status(invoice_id, status)
        if schedule is None:
            self.persistence.persist()
        else:
            schedule(self.persistence.persist)
        return invoice
