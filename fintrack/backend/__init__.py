"""Backend package: action handlers, router and HTTP app."""

from fintrack.backend.handlers import ActionHandlers, parse_row_index
from fintrack.backend.router import ActionRouter
from fintrack.backend.api import create_app, create_router, run_server

__all__ = [
    "ActionHandlers",
    "ActionRouter",
    "create_app",
    "create_router",
    "parse_row_index",
    "run_server",
]
