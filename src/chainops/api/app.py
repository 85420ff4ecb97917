"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chainops.config import get_settings
from chainops.errors import (
    ChainOpsError,
    ContractReadError,
    CredentialNotSetError,
    InvalidParameterError,
    NameResolutionError,
    SwapExecutionError,
    UnknownNetworkError,
    WalletNotFoundError,
)
from chainops.wallets.database import close_db, init_db

logger = logging.getLogger(__name__)

# First match wins
ERROR_STATUS: list[tuple[type[ChainOpsError], int]] = [
    (InvalidParameterError, 400),
    (CredentialNotSetError, 400),
    (UnknownNetworkError, 404),
    (NameResolutionError, 404),
    (WalletNotFoundError, 404),
    (ContractReadError, 502),
    (SwapExecutionError, 502),
]


def status_for(error: ChainOpsError) -> int:
    """HTTP status for an error class."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500


async def chainops_error_handler(request: Request, exc: ChainOpsError) -> JSONResponse:
    """Render a ChainOpsError as a structured failure payload."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc}")

    error = {"code": exc.code, "message": str(exc)}
    if isinstance(exc, SwapExecutionError):
        error["stage"] = exc.stage
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a node, contract or transport failure as a structured 502."""
    logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    error = {"code": "transport_error", "message": str(exc) or type(exc).__name__}
    return JSONResponse(status_code=502, content={"success": False, "error": error})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="ChainOps API",
        description="EVM wallet, transfer and swap operations",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChainOpsError, chainops_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    from chainops.api.routes import health, reads, swaps, transfers, wallets

    app.include_router(health.router, tags=["Health"])
    app.include_router(wallets.router, prefix="/api/v1", tags=["Wallets"])
    app.include_router(reads.router, prefix="/api/v1", tags=["Reads"])
    app.include_router(transfers.router, prefix="/api/v1", tags=["Transfers"])
    app.include_router(swaps.router, prefix="/api/v1", tags=["Swaps"])

    return app


# Default app instance
app = create_app()
