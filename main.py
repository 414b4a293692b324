# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from app.domain.errors import InvoiceNotFoundError, ValidationError
from app.domain.ports.state_storage import StateStorage
# Importamos los routers de la capa de infraestructura
from app.infrastructure.api.routers import dashboard_router, invoices_router
from app.infrastructure.container import Container, build_storage

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')


def create_app(storage: StateStorage = None, auto_save_interval: float = None) -> FastAPI:
    """
    Crea la aplicación. El estado se carga al arrancar; si la carga falla
    la excepción `LoadError` detiene el arranque.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = Container(storage or build_storage())
        container.load_state.execute()
        app.state.container = container

        interval = config.AUTO_SAVE_INTERVAL if auto_save_interval is None else auto_save_interval
        container.persistence.start_auto_save(interval)
        logging.info(f"✅ {config.APP_NAME} v{config.VERSION} iniciado correctamente.")
        try:
            yield
        finally:
            container.persistence.stop_auto_save(flush=True)
            logging.info("Servicio detenido.")

    app = FastAPI(
        title=f"API de Facturación {config.APP_NAME}",
        description="Facturas con IGV, estado de cobro y resumen contable para pequeñas empresas.",
        version=config.VERSION,
        lifespan=lifespan,
    )

    # Configuración de CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(InvoiceNotFoundError)
    async def not_found_handler(request: Request, exc: InvoiceNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    app.include_router(invoices_router.router)
    app.include_router(dashboard_router.router)

    @app.get("/", tags=["Health Check"])
    def read_root():
        return {"status": "ok", "message": f"Bienvenido a la API de {config.APP_NAME}", "version": config.VERSION}

    return app


app = create_app()
