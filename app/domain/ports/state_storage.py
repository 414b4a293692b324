# app/domain/ports/state_storage.py
from abc import ABC, abstractmethod

from app.domain.models.state import FullState


class StateStorage(ABC):
    """
    Puerto para el almacenamiento del estado completo de la aplicación.
    El medio (archivo remoto, API REST, disco local, base de datos) es opaco
    para el dominio: siempre se lee y se escribe el documento entero.
    """

    @abstractmethod
    def load(self) -> FullState:
        """
        Retorna el último estado guardado.
        Lanza `LoadError` si no se pudo obtener.
        """
        pass

    @abstractmethod
    def save(self, state: FullState) -> None:
        """
        Sobrescribe el estado guardado con `state` (gana el último guardado).
        Lanza `PersistenceError` si falla.
        """
        pass
