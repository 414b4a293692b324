# app/application/use_cases/create_invoice.py
import logging
from typing import Any, Callable, Mapping, Optional, Union

from app.application.persistence_coordinator import PersistenceCoordinator
from app.domain.models.invoice import Invoice, InvoiceInput
from app.domain.services.invoice_factory import parse_invoice_input, validate_invoice_input
from app.domain.state_store import StateStore


class CreateInvoiceUseCase:
    def __init__(self, state_store: StateStore, persistence: PersistenceCoordinator):
        self.state_store = state_store
        self.persistence = persistence

    def execute(
        self,
        raw_input: Union[InvoiceInput, Mapping[str, Any]],
        schedule: Optional[Callable[[Callable[[], Any]], Any]] = None,
    ) -> Invoice:
        """
        Valida los datos, crea la factura y la agrega al estado local. Luego
        pide el guardado: con `schedule` (p. ej. una tarea en segundo plano)
        o en el momento si no se indica.

        Lanza `ValidationError` sin tocar el estado si un campo es inválido.
        """
        data = parse_invoice_input(raw_input)
        validate_invoice_input(data)

        invoice = self.state_store.create_invoice(data)
        logging.info(f"[{invoice.invoice_number}] Creada para {invoice.client_ruc} por {invoice.total}. Guardando...")

        if schedule is None:
            self.persistence.persist()
        else:
            schedule(self.persistence.persist)
        return invoice
