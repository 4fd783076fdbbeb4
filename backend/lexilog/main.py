from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes_status import router as status_router
from .api.routes_tags import router as tags_router
from .api.routes_words import router as words_router
from .config import Settings, configure_logging, settings as default_settings
from .core.database import create_tables, make_engine, make_session_factory
from .core.errors import MalformedIdentifier, NotFoundError, PersistenceError, ValidationError
from .core.seed import seed_sample_words
from .core.storage import DatabaseStorage

logger = structlog.get_logger(__name__)


# ---------- Error responses ----------


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid word data", "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Unparseable JSON bodies and the like, reported in the same shape
        errors = {}
        for err in exc.errors():
            loc = [str(part) for part in err["loc"] if part != "body"]
            errors.setdefault(".".join(loc) or "body", err["msg"])
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": errors},
        )

    @app.exception_handler(MalformedIdentifier)
    async def malformed_id_handler(request: Request, exc: MalformedIdentifier):
        return JSONResponse(status_code=400, content={"message": "Invalid ID format"})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


# ---------- App factory ----------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
    )

    engine = make_engine(settings.database_url)
    storage = DatabaseStorage(make_session_factory(engine))

    app.state.settings = settings
    app.state.engine = engine
    app.state.storage = storage

    @app.on_event("startup")
    def startup_event():
        configure_logging(settings.log_level, settings.log_json)

        # Create tables
        create_tables(engine)

        # Seed if empty
        if settings.seed_sample_words:
            seed_sample_words(storage)

        logger.info("startup_complete", app=settings.app_name, environment=settings.environment)

    @app.on_event("shutdown")
    def shutdown_event():
        engine.dispose()

    _register_error_handlers(app)

    app.include_router(words_router)
    app.include_router(tags_router)
    app.include_router(status_router)

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
