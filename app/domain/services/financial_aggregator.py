# app/domain/services/financial_aggregator.py
"""
Cifras del dashboard y del estado de resultados, derivadas de las facturas
y transacciones actuales. Todo se recalcula en cada llamada.

Los registros pueden ser modelos o diccionarios cargados de un JSON viejo:
un monto ausente o ilegible cuenta como cero y una fecha ausente excluye al
registro de las sumas del mes, pero no de las históricas.
"""
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

import config
from app.domain.models.aggregates import Aggregates, IncomeStatementEstimate
from app.domain.models.invoice import InvoiceStatus
from app.domain.models.transaction import TransactionType

ZERO = Decimal("0")
CENTS = Decimal("0.01")
# Tope de un total con IGV al 100 %; por encima se trata como dato corrupto
MAX_AMOUNT = Decimal(config.MAX_INVOICE_AMOUNT) * 2

# Proporciones fijas heredadas del panel web; no son reglas contables
COST_OF_SALES_RATIO = Decimal("0.60")
GROSS_PROFIT_RATIO = Decimal("0.40")
OPERATING_EXPENSES_RATIO = Decimal("0.70")
ADMIN_EXPENSES_RATIO = Decimal("0.30")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _as_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    if not number.is_finite() or abs(number) > MAX_AMOUNT:
        return ZERO
    return number


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value if isinstance(value, str) else None


def _in_month(value: Any, today: date) -> bool:
    day = _as_date(value)
    return day is not None and day.year == today.year and day.month == today.month


def _cents(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize necesita espacio para todos los dígitos enteros más dos decimales
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_aggregates(invoices: Iterable[Any], transactions: Iterable[Any], today: Optional[date] = None) -> Aggregates:
    today = today or date.today()
    invoices = list(invoices or [])
    transactions = list(transactions or [])

    paid = [inv for inv in invoices if _text(_field(inv, "status")) == InvoiceStatus.PAGADA.value]
    pending = [inv for inv in invoices if _text(_field(inv, "status")) == InvoiceStatus.PENDIENTE.value]
    expenses = [tx for tx in transactions if _text(_field(tx, "type")) == TransactionType.EGRESO.value]

    monthly_income = sum(
        (_as_decimal(_field(inv, "total")) for inv in paid if _in_month(_field(inv, "issue_date"), today)),
        ZERO,
    )
    monthly_expenses = sum(
        (_as_decimal(_field(tx, "amount")) for tx in expenses if _in_month(_field(tx, "date"), today)),
        ZERO,
    )
    total_income = sum((_as_decimal(_field(inv, "total")) for inv in paid), ZERO)
    total_expenses = sum((_as_decimal(_field(tx, "amount")) for tx in expenses), ZERO)
    taxes_payable = sum((_as_decimal(_field(inv, "igv_amount")) for inv in invoices), ZERO)
    receivables = sum((_as_decimal(_field(inv, "total")) for inv in pending), ZERO)

    return Aggregates(
        monthly_income=_cents(monthly_income),
        monthly_expenses=_cents(monthly_expenses),
        net_balance=_cents(monthly_income - monthly_expenses),
        pending_invoices_count=len(pending),
        total_income=_cents(total_income),
        total_expenses=_cents(total_expenses),
        taxes_payable=_cents(taxes_payable),
        receivables=_cents(receivables),
        income_statement=estimate_income_statement(total_income, total_expenses),
    )


def estimate_income_statement(total_income: Decimal, total_expenses: Decimal) -> IncomeStatementEstimate:
    return IncomeStatementEstimate(
        cost_of_sales=_cents(total_income * COST_OF_SALES_RATIO),
        gross_profit=_cents(total_income * GROSS_PROFIT_RATIO),
        operating_expenses=_cents(total_expenses * OPERATING_EXPENSES_RATIO),
        admin_expenses=_cents(total_expenses * ADMIN_EXPENSES_RATIO),
    )


def sort_for_display(invoices: Iterable[Any]) -> List[Any]:
    """Facturas de la más reciente a la más antigua; sin fecha van al final."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)

    def sort_key(invoice):
        created = _as_datetime(_field(invoice, "created_at"))
        return (created is not None, created or oldest)

    return sorted(invoices, key=sort_key, reverse=True)
