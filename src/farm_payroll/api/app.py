"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from farm_payroll import __version__
from farm_payroll.api.routes import health_router, payroll_router, tasks_router
from farm_payroll.calculators.ledger import LedgerImbalanceError
from farm_payroll.config import Settings, get_settings
from farm_payroll.database import dispose_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the engine on startup, dispose its pool on shutdown."""
    init_db(app.state.settings.database_url)
    yield
    await dispose_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Farm Payroll API",
        description="Payroll processing, ledger posting and task tracking",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerImbalanceError)
    async def ledger_imbalance_handler(
        request: Request, exc: LedgerImbalanceError
    ) -> JSONResponse:
        # Nothing was written; the totals did not match the runs
        logger.error("Ledger imbalance on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "code": "LEDGER_IMBALANCE"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(tasks_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
