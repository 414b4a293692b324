# app/domain/models/transaction.py
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Union
import datetime as dt
from decimal import Decimal, InvalidOperation
from enum import Enum

from app.domain.models.invoice import Money


class TransactionType(str, Enum):
    INGRESO = "Ingreso"
    EGRESO = "Egreso"


class Transaction(BaseModel):
    """
    Movimiento de caja registrado fuera de este sistema. Solo se lee para
    los agregados, por eso los campos mal formados quedan en None en lugar
    de invalidar la carga completa.
    """
    id: Optional[Union[str, int]] = None
    type: Optional[str] = None
    amount: Optional[Money] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None

    model_config = ConfigDict(extra='allow')

    @field_validator("amount", mode="before")
    @classmethod
    def _lenient_amount(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
        return number if number.is_finite() else None

    @field_validator("date", mode="before")
    @classmethod
    def _lenient_date(cls, value):
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str):
            try:
                return dt.date.fromisoformat(value[:10])
            except ValueError:
                return None
        return None
