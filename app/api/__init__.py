# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.routers import carts, products, users
from app.api.routers.health import router as health_router
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _describe(exc: RequestValidationError) -> str:
    #jedna linia, np. "body.quantity: Input should be greater than 0"
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": _describe(exc)})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Blad bazy danych dla {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shop Service",
        version="1.0.0",
    )

    #niepoprawne body -> 400 zanim dotrze do serwisu
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    app.include_router(health_router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)

    return app
