"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from boutique_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from boutique_ledger.api.v1 import clients, debts, payments, products, receipts, reports, transactions
from boutique_ledger.infrastructure.database.models import Base
from boutique_ledger.infrastructure.database.session import engine
from boutique_ledger.infrastructure.observability.logging import setup_logging
from boutique_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are created on first start; existing tables are left untouched
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Boutique Ledger",
        description="Sales, rentals, payments and debt reporting for a boutique",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(products.router, prefix="/v1", tags=["products"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(receipts.router, prefix="/v1", tags=["receipts"])

    return app


app = create_app()
