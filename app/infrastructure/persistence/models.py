# app/infrastructure/persistence/models.py
from sqlalchemy import Column, DateTime, Integer, String, Text, func

from .database import Base


class EstadoAplicacion(Base):
    """Una fila por foto guardada del estado; `documento` es el JSON completo."""
    __tablename__ = "estado_aplicacion"

    clave = Column(String(50), primary_key=True)
    documento = Column(Text, nullable=False)
    correlativo_facturas = Column(Integer, nullable=False, default=1)
    total_facturas = Column(Integer, nullable=False, default=0)
    actualizado_en = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
