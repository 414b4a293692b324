# app/domain/errors.py
from typing import Optional


class TecsitelError(Exception):
    """Error base del dominio de facturación."""


class ValidationError(TecsitelError):
    """
    Un dato de entrada de la factura no cumple una precondición.
    Siempre recuperable: no se ha modificado ningún estado.
    """
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


class PersistenceError(TecsitelError):
    """El adaptador de almacenamiento no pudo guardar el estado."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class LoadError(TecsitelError):
    """No se pudo cargar el estado inicial. Es fatal para el arranque."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class InvoiceNotFoundError(TecsitelError):
    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"No existe la factura '{invoice_id}'.")
