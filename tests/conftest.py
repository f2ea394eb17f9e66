"""Shared fixtures: an in-memory backend wired the same way production is."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from fintrack.backend import ActionHandlers, ActionRouter, create_app
from fintrack.config import AppSettings, ClientSettings, GroqSettings
from fintrack.services.completion import GroqCompletionService
from fintrack.services.storage import InMemoryTabularStore


FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def store():
    return InMemoryTabularStore()


@pytest.fixture
def http_session():
    """Stand-in for requests.Session; counts outbound completion calls."""
    session = MagicMock()
    session.post.return_value.json.return_value = {
        "choices": [{"message": {"role": "assistant", "content": "Spend less 💡"}}]
    }
    return session


@pytest.fixture
def completion_service(http_session):
    return GroqCompletionService(
        settings=GroqSettings(api_key="test-key"),
        session=http_session,
    )


@pytest.fixture
def handlers(store, completion_service):
    return ActionHandlers(
        store=store,
        completion_service=completion_service,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def router(handlers):
    return ActionRouter(handlers)


@pytest.fixture
def app_settings():
    return AppSettings(storage_backend="memory", log_level="WARNING")


@pytest.fixture
def api(router, app_settings):
    """HTTP client against the backend app."""
    return TestClient(create_app(router=router, settings=app_settings))


@pytest.fixture
def client_settings(tmp_path):
    return ClientSettings(
        api_url="http://backend.test/",
        session_path=str(tmp_path / "session.json"),
        request_timeout_seconds=5,
    )
