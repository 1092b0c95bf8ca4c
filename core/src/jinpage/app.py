from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jinpage import __version__
from jinpage.api.models import fail, status_to_code
from jinpage.api.v1.router import router as v1_router
from jinpage.config import PageConfig, load_page_config, resolve_configured_paths
from jinpage.home import JinPagePaths, ensure_jinpage_layout, resolve_jinpage_home
from jinpage.params import build_applet_page
from jinpage.plugins import read_plugin_classnames
from jinpage.prefs import FilesystemPreferencesStore, NullPreferencesStore, PreferencesStore
from jinpage.ui.router import router as ui_router

logger = logging.getLogger(__name__)

LOG_FILENAME = "jinpage.log"


def configure_file_logging(paths: JinPagePaths, config: PageConfig) -> None:
    file_handler = RotatingFileHandler(
        paths.logs_dir / LOG_FILENAME,
        maxBytes=config.logging.max_size_mb * 1024 * 1024,
        backupCount=config.logging.backup_count,
        encoding="utf-8",
    )
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    # Avoid adding duplicate handlers if reloaded
    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        root.addHandler(file_handler)


def build_prefs_store(paths: JinPagePaths, config: PageConfig) -> PreferencesStore:
    if config.prefs.enabled:
        return FilesystemPreferencesStore(paths.prefs_dir)
    return NullPreferencesStore()


def create_app() -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        home = resolve_jinpage_home()
        paths = ensure_jinpage_layout(home)
        config = load_page_config(paths)
        paths = resolve_configured_paths(paths, config)

        configure_file_logging(paths, config)

        logger.info("JinPage starting up")
        logger.info(f"Logs directory: {paths.logs_dir}")

        page = build_applet_page(config.applet, config.prefs)
        plugins = read_plugin_classnames(page.parameters)
        logger.info(
            f"Applet page ready: {len(page.parameters)} parameters, {len(plugins)} plugins"
        )

        app.state.jinpage_home = home
        app.state.jinpage_paths = paths
        app.state.jinpage_config = config
        app.state.applet_page = page
        app.state.prefs_store = build_prefs_store(paths, config)

        yield

    app = FastAPI(title="JinPage", version=__version__, lifespan=_lifespan)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=fail(
                code="validation_error",
                message="Request validation failed",
                details=exc.errors(),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(
                code=status_to_code(exc.status_code),
                message=str(exc.detail),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(
                code=status_to_code(exc.status_code),
                message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=fail(code="internal_error", message="Internal server error").model_dump(
                mode="json"
            ),
        )

    app.include_router(v1_router)
    app.include_router(ui_router)

    @app.get("/")
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/applet", status_code=302)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
