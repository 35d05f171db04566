from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from core.config import ALLOWED_ORIGINS
from core.errors import InternalError, StorefrontError, ValidationFailed
from core.logger import get_logger
from db import Database, get_database
from routers import router as api_router

logger = get_logger(__name__)


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        errors.append({
            "field": ".".join(loc[1:]) or location,
            "msg": err.get("msg", "Invalid value"),
            "value": err.get("input"),
            "location": location,
        })
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        failed = ValidationFailed(_field_errors(exc))
        return JSONResponse(status_code=failed.status_code, content=jsonable_encoder(failed.to_body()))

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        err = InternalError()
        return JSONResponse(status_code=err.status_code, content=err.to_body())


def create_app(database: Optional[Database] = None) -> FastAPI:
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.connect()
        await database.ensure_indexes()
        app.state.database = database
        logger.info("Storefront API started")
        try:
            yield
        finally:
            database.close()
            logger.info("Storefront API stopped")

    app = FastAPI(
        title="Storefront API",
        description="Product catalog and shopping cart API",
        version="1.0.0",
        lifespan=lifespan,
    )

    allow_origins = [origin.strip() for origin in ALLOWED_ORIGINS.split(",")] if ALLOWED_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"message": "Storefront API is running!"}

    @app.get("/health")
    async def health(db: Database = Depends(get_database)):
        await db.ping()
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
