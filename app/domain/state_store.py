# app/domain/state_store.py
import logging
import threading
from typing import List, Optional, Tuple, Union

from app.domain.errors import InvoiceNotFoundError
from app.domain.models.invoice import Invoice, InvoiceInput, InvoiceStatus
from app.domain.models.state import FullState, User
from app.domain.models.transaction import Transaction
from app.domain.services.financial_aggregator import sort_for_display
from app.domain.services.invoice_factory import InvoiceCounter, create_invoice


def _highest_invoice_number(invoices: List[Invoice]) -> int:
    highest = 0
    for invoice in invoices:
        _, _, number = invoice.invoice_number.rpartition("-")
        if number.isdigit():
            highest = max(highest, int(number))
    return highest


class StateStore:
    """
    Estado canónico en memoria: facturas, transacciones, correlativo y
    usuario. Lo posee un único controlador y se pasa explícitamente a los
    casos de uso.
    """
    def __init__(self, state: Optional[FullState] = None):
        self._lock = threading.RLock()
        self._invoices: List[Invoice] = []
        self._transactions: List[Transaction] = []
        self._user = User()
        self._counter = InvoiceCounter()
        self.replace(state or FullState())

    @property
    def counter(self) -> InvoiceCounter:
        return self._counter

    @property
    def invoices(self) -> Tuple[Invoice, ...]:
        """Facturas en orden de inserción (no es el orden de visualización)."""
        with self._lock:
            return tuple(self._invoices)

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        with self._lock:
            return tuple(self._transactions)

    @property
    def user(self) -> User:
        return self._user

    def append(self, invoice: Invoice) -> None:
        with self._lock:
            self._invoices.append(invoice)

    def create_invoice(self, data: InvoiceInput) -> Invoice:
        """Asigna el correlativo, construye la factura y la agrega sin soltar el candado."""
        with self._lock:
            invoice = create_invoice(data, self._counter)
            self.append(invoice)
        logging.info(f"Factura {invoice.invoice_number} agregada al estado local.")
        return invoice

    def get_invoice(self, invoice_id: Union[str, int]) -> Invoice:
        with self._lock:
            for invoice in self._invoices:
                if str(invoice.id) == str(invoice_id):
                    return invoice
        raise InvoiceNotFoundError(str(invoice_id))

    def set_status(self, invoice_id: Union[str, int], status: InvoiceStatus) -> Invoice:
        """Único cambio permitido sobre una factura existente."""
        with self._lock:
            for index, invoice in enumerate(self._invoices):
                if str(invoice.id) == str(invoice_id):
                    updated = invoice.model_copy(update={"status": InvoiceStatus(status)})
                    self._invoices[index] = updated
                    logging.info(f"Factura {updated.invoice_number}: {invoice.status.value} -> {updated.status.value}")
                    return updated
        raise InvoiceNotFoundError(str(invoice_id))

    def list_invoices(self) -> List[Invoice]:
        return sort_for_display(self.invoices)

    def snapshot(self) -> FullState:
        """Copia profunda del estado completo, lista para persistir."""
        with self._lock:
            state = FullState(
                invoices=list(self._invoices),
                transactions=list(self._transactions),
                invoice_counter=self._counter.value,
                user=self._user,
            )
        return state.model_copy(deep=True)

    def replace(self, state: FullState) -> None:
        """Sustituye todo el estado de una vez; nunca lo sobrescribe a medias."""
        incoming = state.model_copy(deep=True)
        # El correlativo nunca puede quedar por debajo de un número ya emitido
        next_number = max(incoming.invoice_counter, _highest_invoice_number(incoming.invoices) + 1)
        if next_number != incoming.invoice_counter:
            logging.warning(
                f"El correlativo guardado ({incoming.invoice_counter}) es menor que el de las facturas "
                f"existentes; se usará {next_number}."
            )
        with self._lock:
            self._invoices = list(incoming.invoices)
            self._transactions = list(incoming.transactions)
            self._user = incoming.user
            self._counter.reset(next_number)
