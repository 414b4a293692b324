# app/domain/models/aggregates.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from decimal import Decimal


class IncomeStatementEstimate(BaseModel):
    """
    Estado de resultados simplificado. Son proporciones fijas de los
    ingresos y egresos totales, no una contabilidad real.
    """
    cost_of_sales: Decimal
    gross_profit: Decimal
    operating_expenses: Decimal
    admin_expenses: Decimal
    estimated: bool = True

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Aggregates(BaseModel):
    monthly_income: Decimal
    monthly_expenses: Decimal
    net_balance: Decimal
    pending_invoices_count: int
    total_income: Decimal
    total_expenses: Decimal
    taxes_payable: Decimal
    receivables: Decimal
    income_statement: IncomeStatementEstimate

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
