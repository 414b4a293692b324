# app/infrastructure/api/routers/invoices_router.py
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from pydantic import BaseModel

import config
from app.domain.errors import ValidationError
from app.domain.models.invoice import Invoice, InvoiceStatusUpdate, InvoiceTotals
from app.domain.services.invoice_factory import MAX_AMOUNT, compute_invoice_totals
from app.infrastructure.api.dependencies import get_container
from app.infrastructure.container import Container

router = APIRouter(prefix="/api/v1/facturas", tags=["Facturas"])


class TotalsRequest(BaseModel):
    amount: Decimal = Decimal("0")
    igv_rate: Optional[Decimal] = None


@router.post("", status_code=201, response_model=Invoice, summary="Crear una nueva factura")
def create_invoice(
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(..., description="Campos del formulario de la factura."),
    container: Container = Depends(get_container),
):
    """
    Crea la factura en el estado local y responde de inmediato; el guardado
    en el almacenamiento corre en segundo plano.
    """
    return container.create_invoice.execute(payload, schedule=background_tasks.add_task)


@router.get("", response_model=List[Invoice], summary="Listar facturas, las más recientes primero")
def list_invoices(container: Container = Depends(get_container)):
    return container.state_store.list_invoices()


@router.post("/calcular", response_model=InvoiceTotals, summary="Calcular IGV y total")
def preview_totals(body: TotalsRequest):
    igv_rate = body.igv_rate if body.igv_rate is not None else Decimal(config.IGV_DEFAULT)
    if abs(body.amount) > MAX_AMOUNT:
        raise ValidationError("amount", f"El monto no puede superar {MAX_AMOUNT}.")
    if not (0 <= igv_rate <= 100):
        raise ValidationError("igv_rate", "La tasa de IGV debe estar entre 0 y 100.")
    igv_amount, total = compute_invoice_totals(body.amount, igv_rate)
    return InvoiceTotals(amount=body.amount, igv_rate=igv_rate, igv_amount=igv_amount, total=total)


@router.get("/{invoice_id}", response_model=Invoice, summary="Ver una factura")
def get_invoice(invoice_id: str, container: Container = Depends(get_container)):
    return container.state_store.get_invoice(invoice_id)


@router.patch("/{invoice_id}/estado", response_model=Invoice, summary="Cambiar el estado de una factura")
def update_invoice_status(
    invoice_id: str,
    update: InvoiceStatusUpdate,
    background_tasks: BackgroundTasks,
    container: Container = Depends(get_container),
):
    return container.update_invoice_status.execute(invoice_id, update.status, schedule=background_tasks.add_task)
