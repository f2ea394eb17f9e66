"""
HTTP Surface for the Backend

A single endpoint (`/`) answering GET and POST, like a spreadsheet web app
deployment. Every handled request returns HTTP 200 with a JSON body; the
outcome is carried by the envelope, not by the status code.
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

import fintrack
from fintrack.audit import configure_logging
from fintrack.backend.handlers import (
    DEFAULT_TRANSACTIONS_TABLE,
    DEFAULT_USERS_TABLE,
    ActionHandlers,
)
from fintrack.backend.router import ActionRouter
from fintrack.config import AppSettings, get_settings, validate_all_settings
from fintrack.services.completion import GroqCompletionService
from fintrack.services.storage import create_store


def create_router(settings: Optional[AppSettings] = None) -> ActionRouter:
    """Wire store, completion proxy and handlers from configuration."""
    settings = settings or get_settings().app
    store = create_store(settings)

    users_table = DEFAULT_USERS_TABLE
    transactions_table = DEFAULT_TRANSACTIONS_TABLE
    if settings.storage_backend == "google_sheets":
        sheets = get_settings().google_sheets
        users_table = sheets.users_sheet_name
        transactions_table = sheets.transactions_sheet_name

    handlers = ActionHandlers(
        store=store,
        completion_service=GroqCompletionService(),
        users_table=users_table,
        transactions_table=transactions_table,
    )
    return ActionRouter(handlers)


def create_app(
    router: Optional[ActionRouter] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        router: Pre-built router (tests inject one over an in-memory store)
        settings: Backend settings; read from the environment if omitted
    """
    settings = settings or get_settings().app
    configure_logging(settings.log_level)
    router = router or create_router(settings)

    app = FastAPI(
        title="Fintrack Backend",
        version=fintrack.__version__,
        debug=settings.debug_mode,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/")
    def get_action(request: Request) -> JSONResponse:
        return JSONResponse(router.handle_get(dict(request.query_params)))

    @app.post("/")
    async def post_action(request: Request) -> JSONResponse:
        body = await request.body()
        # Handlers block on the spreadsheet; keep them off the event loop
        result = await run_in_threadpool(router.handle_post, body)
        return JSONResponse(result)

    @app.get("/health")
    def health() -> dict:
        # Section load errors can echo config values; report flags only
        configuration = {
            name: ok
            for name, ok in validate_all_settings().items()
            if not name.endswith("_error")
        }
        return {
            "status": "ok",
            "version": fintrack.__version__,
            "storage_backend": settings.storage_backend,
            "configuration": configuration,
        }

    return app


def run_server() -> None:
    """Console entry point: serve the backend with uvicorn."""
    settings = get_settings().app
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
