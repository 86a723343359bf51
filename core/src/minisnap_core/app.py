from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.responses import Response

from minisnap_core import __version__
from minisnap_core.auth import login_url
from minisnap_core.config import AppConfig, LoggingConfig, load_config
from minisnap_core.content.store import EntryStore
from minisnap_core.errors import MinisnapError, SessionInvalid
from minisnap_core.sessions import SessionRegistry
from minisnap_core.ui.router import render_error
from minisnap_core.ui.router import router as ui_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_file_logging(config: LoggingConfig) -> None:
    if not config.log_file:
        return

    file_handler = RotatingFileHandler(
        config.log_file,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(config.level)
    # Avoid adding duplicate handlers if reloaded
    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        root.addHandler(file_handler)


def create_app(
    config: AppConfig | None = None,
    *,
    store: EntryStore | None = None,
    sessions: SessionRegistry | None = None,
) -> FastAPI:
    """Build the ASGI app.

    Config, store and session registry may be injected; anything missing is
    built at startup from the environment.
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        cfg = config or load_config()
        configure_file_logging(cfg.logging)

        app.state.config = cfg
        app.state.store = store or EntryStore(cfg.content_dir)
        app.state.sessions = sessions or SessionRegistry(ttl=cfg.session.ttl)

        logger.info("minisnap starting up")
        logger.info("Content directory: %s", app.state.store.root)
        yield
        logger.info("minisnap shutting down")

    app = FastAPI(
        title="minisnap",
        version=__version__,
        lifespan=_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(SessionInvalid)
    async def _session_invalid_handler(request: Request, exc: SessionInvalid) -> Response:
        return RedirectResponse(url=login_url(exc.next_url), status_code=302)

    @app.exception_handler(MinisnapError)
    def _domain_error_handler(request: Request, exc: MinisnapError) -> Response:
        operation = f"{request.method} {request.url.path}"
        if exc.status_code >= 500:
            logger.error(
                "%s failed (slug=%s): %s", operation, exc.slug, exc.message, exc_info=exc
            )
            return render_error(request, exc.status_code, "Internal server error")

        logger.warning("%s rejected (slug=%s): %s", operation, exc.slug, exc.message)
        message = "Not Found" if exc.status_code == 404 else exc.message
        return render_error(request, exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        logger.warning("%s %s: invalid form data", request.method, request.url.path)
        return render_error(request, 400, "Invalid form data")

    @app.get("/")
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/admin", status_code=302)

    @app.get("/healthz")
    async def healthz() -> PlainTextResponse:
        return PlainTextResponse("ok")

    # Registered last: /{slug} would otherwise shadow fixed paths.
    app.include_router(ui_router)

    return app
