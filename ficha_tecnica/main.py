"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ficha_tecnica import __version__
from ficha_tecnica.api.routes import health, recipes
from ficha_tecnica.config import settings
from ficha_tecnica.core.request_id import get_request_id
from ficha_tecnica.middleware.logging import RequestLoggingMiddleware
from ficha_tecnica.middleware.rate_limit import limiter
from ficha_tecnica.middleware.security import SecurityHeadersMiddleware, setup_cors
from ficha_tecnica.utils.exceptions import (
    FichaTecnicaException,
    ImageProcessingError,
    NoInputError,
)
from ficha_tecnica.utils.logging_config import setup_logging

# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ficha Técnica API",
    description="Converts recipes (text, link or photo) into technical sheet spreadsheets using Gemini",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(FichaTecnicaException)
async def ficha_tecnica_exception_handler(request: Request, exc: FichaTecnicaException) -> JSONResponse:
    """Map pipeline failures to the {erro, detalhes} envelope."""
    request_id = get_request_id()

    if isinstance(exc, NoInputError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Nenhuma receita fornecida"
    elif isinstance(exc, ImageProcessingError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Imagem inválida"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_message = "Erro ao processar receita"

    log = logger.warning if status_code < 500 else logger.error
    log(
        f"Exception: {error_message}",
        extra={
            "request_id": request_id,
            "error_type": type(exc).__name__,
            "exception": str(exc),
        },
        exc_info=status_code >= 500,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "erro": error_message,
            "detalhes": str(exc),
            "request_id": request_id,
        },
    )


# Add middleware (last added runs first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
setup_cors(app)

app.include_router(health.router)
app.include_router(recipes.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Ficha Técnica API",
        "version": __version__,
        "docs": "/docs",
    }
