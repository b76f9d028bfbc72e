import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docstore.config import Settings, settings as default_settings
from docstore.database import check_integrity, get_engine, get_session_factory, init_db
from docstore.errors import DocumentError, NoFile, NotFound
from docstore.routers import documents
from docstore.services.blob_store import BlobStore
from docstore.utils.filesystem import ensure_data_dirs

VERSION = "0.1.0"

logger = logging.getLogger("docstore")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create storage, schema and the shared store handles
        ensure_data_dirs(settings.data_path, settings.uploads_dir)
        init_db(settings.db_path)
        result = check_integrity(settings.db_path)
        if result == "ok":
            logger.info("Database integrity check passed: %s", settings.db_path)
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s (%s)", result, settings.db_path)

        engine = get_engine(settings.db_path)
        blob_store = BlobStore(
            settings.uploads_dir,
            max_size=settings.max_upload_bytes,
            allowed_type=settings.allowed_content_type,
        )
        blob_store.ensure_root()
        app.state.settings = settings
        app.state.session_factory = get_session_factory(engine)
        app.state.blob_store = blob_store
        logger.info("Storing uploads in %s", blob_store.root)
        yield
        # Shutdown: release pooled connections
        engine.dispose()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Document Store",
        description="Upload, list, download and delete PDF documents",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocumentError)
    async def document_error_handler(request: Request, exc: DocumentError):
        logger.warning(
            "Handled %s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.message,
        )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        locations = [tuple(err.get("loc", ())) for err in exc.errors()]
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, locations)
        # Path parameters are document ids.
        if locations and all(loc[:1] == ("path",) for loc in locations):
            return _error_response(NotFound.status_code, NotFound.default_message)
        # A file part without a filename arrives as a plain form field.
        if any(loc[:2] == ("body", "file") for loc in locations):
            return _error_response(NoFile.status_code, NoFile.default_message)
        return _error_response(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "An unexpected error occurred")

    app.include_router(documents.router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": VERSION}

    return app


logging.basicConfig(level=default_settings.log_level.upper())

app = create_app()
