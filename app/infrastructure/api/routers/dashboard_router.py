# app/infrastructure/api/routers/dashboard_router.py
from fastapi import APIRouter, Depends

from app.domain.models.aggregates import Aggregates
from app.domain.models.state import User
from app.domain.services.financial_aggregator import compute_aggregates
from app.infrastructure.api.dependencies import get_container
from app.infrastructure.container import Container

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])


@router.get("/dashboard", response_model=Aggregates, summary="Cifras del dashboard y estado de resultados")
def get_dashboard(container: Container = Depends(get_container)):
    store = container.state_store
    return compute_aggregates(store.invoices, store.transactions)


@router.get("/usuario", response_model=User)
def get_user(container: Container = Depends(get_container)):
    return container.state_store.user


@router.get("/persistencia", summary="Estado del último guardado")
def get_persistence_status(container: Container = Depends(get_container)):
    return container.persistence.status()


@router.post("/persistencia/reintentar", summary="Reintentar un guardado pendiente")
def retry_persistence(container: Container = Depends(get_container)):
    outcome = container.persistence.retry_pending()
    return {"outcome": outcome.value if outcome else "nothing_pending", **container.persistence.status()}
