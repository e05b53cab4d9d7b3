from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from tripbook.db.session import shutdown
from tripbook.dependencies import DB
from tripbook.exceptions import DomainError, NotFoundError
from tripbook.logging import get_logger
from tripbook.middleware import RequestContextMiddleware
from tripbook.routers import accommodations, vehicles
from tripbook.schemas.error import ErrorCode, ErrorDetail, ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close pooled database connections on shutdown."""
    yield
    await shutdown()


app = FastAPI(title="tripbook", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)
app.include_router(accommodations.router)
app.include_router(vehicles.router)


def _error_json(code: ErrorCode, message: str) -> dict[str, object]:
    """Build the standard error envelope as a dict for JSONResponse."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump()


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 for unknown or inactive listings."""
    logger.info("listing_not_found", entity=exc.entity, id=str(exc.identifier))
    return JSONResponse(status_code=404, content=_error_json("not_found", exc.message))


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return 400 for generic domain-level violations."""
    logger.warning("domain_error", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_json("domain_error", exc.message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions with traceback and return a generic 500."""
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=_error_json("internal_error", "Internal server error"),
    )


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check: 200 only if the hosted database answers a ping."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
