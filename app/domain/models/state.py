# app/domain/models/state.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List

import config
from app.domain.models.invoice import Invoice
from app.domain.models.transaction import Transaction


class User(BaseModel):
    username: str = config.DEFAULT_USER["username"]
    avatar: str = config.DEFAULT_USER["avatar"]

    model_config = ConfigDict(extra='allow')


class FullState(BaseModel):
    """
    Estado completo de la aplicación tal como se guarda en `database.json`.
    Las claves ausentes toman los mismos valores por defecto que el panel web.
    """
    invoices: List[Invoice] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    invoice_counter: int = Field(1, alias="invoiceCounter", ge=1)
    user: User = Field(default_factory=User)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("invoice_counter", mode="before")
    @classmethod
    def _falsy_counter_as_one(cls, value):
        return 1 if not value else value

    def to_document(self) -> dict:
        """Diccionario serializable a JSON con los nombres de campo persistidos."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, document: dict) -> "FullState":
        if document is not None and not isinstance(document, dict):
            raise ValueError(f"Se esperaba un objeto JSON, se recibió {type(document).__name__}.")
        # Un `null` guardado equivale a la clave ausente
        cleaned = {key: value for key, value in (document or {}).items() if value is not None}
        return cls.model_validate(cleaned)
