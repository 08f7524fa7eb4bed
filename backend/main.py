"""FastAPI main application."""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import campaigns as campaigns_api, scenarios as scenarios_api
from backend.app.api.deps import get_settings
from backend.app.catalog.loader import CatalogError, load_catalog
from backend.app.config import log_resolved_settings
from backend.app.core.error_handling import (
    create_error_response,
    log_error_with_context,
    node_for_path,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def _parse_cors_allowlist(raw: str) -> list[str]:
    origins = [o.strip() for o in raw.split(",") if o and o.strip()]
    if origins:
        return origins
    return [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


CORS_ALLOW_ORIGINS = _parse_cors_allowlist(os.environ.get("WARHOST_CORS_ALLOW_ORIGINS", ""))


def _validate_environment() -> None:
    """Log startup health checks. Catalog problems are fatal; a missing credential is not."""
    catalog = load_catalog()
    logger.info(
        "Catalog ready (%d factions, %d planets, %d tones)",
        len(catalog.factions), len(catalog.planets), len(catalog.tones),
    )
    settings = get_settings()
    log_resolved_settings(settings)
    if not settings.enhancement_available:
        logger.warning("Text enhancement unavailable; generation will return template narratives")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        _validate_environment()
    except CatalogError as exc:
        raise RuntimeError(f"Cannot start without a valid option catalog: {exc}") from exc
    logger.info("API startup complete (version=%s)", APP_VERSION)
    yield


app = FastAPI(title="Warhost Chronicle API", version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTPExceptions with structured error responses."""
    node = node_for_path(request.url.path)
    error_response = create_error_response(
        error_code=f"{node.upper()}_HTTP_{exc.status_code}",
        message=exc.detail,
        node=node,
        details={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=error_response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Body was not a JSON object at all; field-level problems are defaulted, not rejected."""
    node = node_for_path(request.url.path)
    error_response = create_error_response(
        error_code=f"{node.upper()}_VALIDATION",
        message="Request body must be a JSON object",
        node=node,
        details={
            "path": request.url.path,
            "errors": [
                {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        },
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=error_response)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler: return structured error responses with logging."""
    campaign_id = None
    scenario_id = None
    if hasattr(request, "path_params"):
        campaign_id = request.path_params.get("campaign_id")
        scenario_id = request.path_params.get("scenario_id")

    node = node_for_path(request.url.path)

    log_error_with_context(
        error=exc,
        node_name=node,
        campaign_id=campaign_id,
        scenario_id=scenario_id,
        endpoint=request.url.path,
        extra_context={
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
        },
    )

    message = f"An error occurred: {type(exc).__name__}"
    if str(exc):
        message = str(exc)

    error_response = create_error_response(
        error_code=f"{node.upper()}_ERROR",
        message=message,
        node=node,
        details={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_response)


app.include_router(scenarios_api.router)
app.include_router(campaigns_api.router)


@app.get("/")
async def root():
    return {"message": "Warhost Chronicle API", "version": APP_VERSION}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
