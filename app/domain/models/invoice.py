# app/domain/models/invoice.py
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict, PlainSerializer, field_validator
from typing import Annotated, Optional, Union
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

import config


class InvoiceStatus(str, Enum):
    PENDIENTE = "Pendiente"
    PAGADA = "Pagada"
    RECHAZADO = "Rechazado"
    VENCIDO = "Vencido"
    ANULADA = "Anulada"


def _today() -> date:
    return date.today()


def _default_due_date() -> date:
    return date.today() + timedelta(days=config.DEFAULT_DUE_DAYS)


def _float_as_text(value):
    # Un float leído del JSON se convierte desde su texto, no desde su valor binario
    return str(value) if isinstance(value, float) else value


# Montos en `Decimal` dentro del proceso y como número en el JSON, que es lo
# que espera el panel web (`inv.total.toFixed(2)`)
Money = Annotated[
    Decimal,
    BeforeValidator(_float_as_text),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class InvoiceInput(BaseModel):
    """
    Datos crudos del formulario de nueva factura. No garantiza que los
    valores sean válidos: eso lo decide `validate_invoice_input`.
    """
    client_ruc: str = ""
    client_name: str = ""
    description: str = ""
    amount: Decimal = Decimal("0")
    igv_rate: Decimal = Decimal(config.IGV_DEFAULT)
    issue_date: date = Field(default_factory=_today)
    due_date: date = Field(default_factory=_default_due_date)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("client_ruc", "client_name", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("amount", mode="before")
    @classmethod
    def _empty_amount_as_zero(cls, value):
        return "0" if value is None or value == "" else value

    @field_validator("igv_rate", mode="before")
    @classmethod
    def _empty_rate_as_default(cls, value):
        # El formulario original usaba la tasa por defecto si el campo venía vacío
        return config.IGV_DEFAULT if value is None or value == "" else value

    @field_validator("issue_date", mode="before")
    @classmethod
    def _empty_issue_date_as_today(cls, value):
        return _today() if value is None or value == "" else value

    @field_validator("due_date", mode="before")
    @classmethod
    def _empty_due_date_as_default(cls, value):
        return _default_due_date() if value is None or value == "" else value


class Invoice(BaseModel):
    """
    Factura emitida. Los montos derivados (IGV y total) se calculan una sola
    vez al crearla y se guardan tal cual; solo `status` cambia después.
    """
    id: Union[str, int]
    invoice_number: str
    client_ruc: str
    client_name: str
    description: str
    amount: Money
    igv_rate: Money
    igv_amount: Money
    total: Money
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: InvoiceStatus = InvoiceStatus.PENDIENTE
    created_at: Optional[datetime] = None
    currency: str = config.CURRENCY

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        extra='allow'          # Conserva campos adicionales de datos heredados
    )

    @field_validator("issue_date", "due_date", "created_at", mode="wrap")
    @classmethod
    def _unreadable_date_as_none(cls, value, handler):
        # El panel web guardaba las fechas sin validarlas; una vacía o ilegible
        # no debe impedir cargar el resto del estado
        if value is None or value == "":
            return None
        try:
            return handler(value)
        except ValueError:
            return None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceTotals(BaseModel):
    """Vista previa de IGV y total mientras se llena el formulario."""
    amount: Decimal
    igv_rate: Decimal
    igv_amount: Decimal
    total: Decimal
    currency_symbol: str = config.CURRENCY_SYMBOL
