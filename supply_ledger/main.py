"""
Printer Supply Ledger: FastAPI Application.

This is the entry point for the application.
All routers and the domain error handler are registered here.
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from supply_ledger.config import get_settings
from supply_ledger.exceptions import SupplyLedgerError, TransientError
from supply_ledger.logging_config import configure_logging
from supply_ledger.api.health import router as health_router
from supply_ledger.api.catalog import router as catalog_router
from supply_ledger.api.printers import router as printers_router
from supply_ledger.api.movements import router as movements_router

settings = get_settings()
configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Stock ledger for printer toners and drums",
)

# Register routers
app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(printers_router)
app.include_router(movements_router)


@app.exception_handler(SupplyLedgerError)
async def handle_domain_error(request: Request, exc: SupplyLedgerError):
    """Render a domain error as {code, message, details} with its status."""
    if isinstance(exc, TransientError):
        logger.warning(
            "%s %s failed transiently: %s", request.method, request.url.path, exc.code
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


if __name__ == "__main__":
    uvicorn.run(
        "supply_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
