# app/domain/services/invoice_factory.py
import threading
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

import config
from app.domain.errors import ValidationError
from app.domain.models.invoice import Invoice, InvoiceInput, InvoiceStatus
from app.domain.services.ruc_validator import is_valid_ruc

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)
MAX_AMOUNT = Decimal(config.MAX_INVOICE_AMOUNT)


class InvoiceCounter:
    """
    Contador del correlativo de facturas. `allocate` lee y aumenta el valor
    dentro del mismo candado, así dos creaciones simultáneas nunca reciben
    el mismo número.
    """
    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError("El correlativo debe empezar en 1 o más.")
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        """Siguiente número que se asignará."""
        return self._value

    def allocate(self) -> int:
        with self._lock:
            current = self._value
            self._value += 1
            return current

    def reset(self, value: int) -> None:
        if value < 1:
            raise ValueError("El correlativo debe ser 1 o más.")
        with self._lock:
            self._value = value


def format_invoice_number(number: int, series: str = config.INVOICE_SERIES) -> str:
    return f"{series}-{number:0{config.INVOICE_NUMBER_DIGITS}d}"


def compute_invoice_totals(amount: Union[Decimal, int, str], igv_rate: Union[Decimal, int, str]) -> Tuple[Decimal, Decimal]:
    """Retorna (igv_amount, total) redondeados al céntimo."""
    amount = Decimal(str(amount))
    igv_rate = Decimal(str(igv_rate))
    igv_amount = (amount * igv_rate / HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = (amount + igv_amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return igv_amount, total


def parse_invoice_input(raw: Union[InvoiceInput, Mapping[str, Any]]) -> InvoiceInput:
    """
    Convierte los datos crudos del formulario en `InvoiceInput`. Un valor que
    ni siquiera tiene el tipo correcto (p. ej. un monto "abc") se reporta
    como `ValidationError` sobre ese campo.
    """
    if isinstance(raw, InvoiceInput):
        return raw
    try:
        return InvoiceInput.model_validate(dict(raw or {}))
    except PydanticValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(part) for part in first_error.get("loc", ())) or "input"
        raise ValidationError(field, first_error.get("msg", "Valor inválido.")) from e


def validate_invoice_input(data: InvoiceInput) -> None:
    """Lanza `ValidationError` con el primer campo que no cumple su precondición."""
    if not is_valid_ruc(data.client_ruc):
        raise ValidationError("client_ruc", "El RUC debe tener 11 dígitos y un dígito verificador válido.")
    if not data.client_name:
        raise ValidationError("client_name", "La razón social del cliente es obligatoria.")
    if not data.description:
        raise ValidationError("description", "La descripción es obligatoria.")
    if data.amount <= 0:
        raise ValidationError("amount", "El monto debe ser mayor a cero.")
    if data.amount > MAX_AMOUNT:
        raise ValidationError("amount", f"El monto no puede superar {MAX_AMOUNT}.")
    if not (0 <= data.igv_rate <= 100):
        raise ValidationError("igv_rate", "La tasa de IGV debe estar entre 0 y 100.")
    if data.due_date < data.issue_date:
        raise ValidationError("due_date", "La fecha de vencimiento no puede ser anterior a la de emisión.")


def create_invoice(data: InvoiceInput, counter: InvoiceCounter, now: Optional[datetime] = None) -> Invoice:
    """
    Construye la factura completa a partir de datos ya validados.
    No la agrega a ninguna colección ni la persiste.
    """
    igv_amount, total = compute_invoice_totals(data.amount, data.igv_rate)
    invoice_number = format_invoice_number(counter.allocate())

    return Invoice(
        id=uuid.uuid4().hex,
        invoice_number=invoice_number,
        client_ruc=data.client_ruc,
        client_name=data.client_name,
        description=data.description,
        amount=data.amount,
        igv_rate=data.igv_rate,
        igv_amount=igv_amount,
        total=total,
        issue_date=data.issue_date,
        due_date=data.due_date,
        status=InvoiceStatus.PENDIENTE,
        created_at=now or datetime.now(timezone.utc),
    )
