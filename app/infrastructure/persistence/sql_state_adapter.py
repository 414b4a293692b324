# app/infrastructure/persistence/sql_state_adapter.py
import json
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.domain.errors import LoadError, PersistenceError
from app.domain.models.state import FullState
from app.domain.ports.state_storage import StateStorage
from .database import create_session_factory
from .models import EstadoAplicacion


class SQLStateStorage(StateStorage):
    """
    Guarda la foto completa del estado en una tabla. El correlativo se copia
    en su propia columna para poder consultarlo sin leer el JSON.
    """
    def __init__(self, session_factory: sessionmaker = None, key: str = "default"):
        self.session_factory = session_factory or create_session_factory()
        self.key = key

    def load(self) -> FullState:
        db = self.session_factory()
        try:
            row = db.get(EstadoAplicacion, self.key)
            if row is None:
                logging.info(f"No hay estado guardado con la clave '{self.key}'. Se inicia vacío.")
                return FullState()
            return FullState.from_document(json.loads(row.documento))
        except (SQLAlchemyError, ValueError) as e:
            raise LoadError(f"No se pudo leer el estado desde la base de datos: {e}", e) from e
        finally:
            db.close()

    def save(self, state: FullState) -> None:
        db = self.session_factory()
        try:
            row = db.get(EstadoAplicacion, self.key)
            if row is None:
                row = EstadoAplicacion(clave=self.key)
                db.add(row)
            row.documento = json.dumps(state.to_document(), ensure_ascii=False)
            row.correlativo_facturas = state.invoice_counter
            row.total_facturas = len(state.invoices)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"No se pudo guardar el estado en la base de datos: {e}", e) from e
        finally:
            db.close()
