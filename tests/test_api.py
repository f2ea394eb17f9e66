"""
Tests for the action router and its HTTP surface.

Everything goes through FastAPI's TestClient against an in-memory store.
"""

import json
from unittest.mock import MagicMock

import pytest

from fintrack.backend import ActionRouter


def post(api, payload, content_type="text/plain"):
    """POST a JSON body the way a browser client does (text/plain)."""
    return api.post("/", content=json.dumps(payload), headers={"Content-Type": content_type})


class TestGetActions:
    """Tests for query-string actions."""

    def test_check_user(self, api):
        post(api, {"action": "registerUser", "username": "ana", "password": "1234"})
        response = api.get("/", params={"action": "checkUser", "username": "ana", "password": "1234", "timestamp": 1})

        assert response.status_code == 200
        assert response.json() == {"success": True, "username": "ana"}

    def test_get_data(self, api):
        post(api, {"action": "add", "username": "ana", "description": "Bus", "amount": "4.5"})
        response = api.get("/", params={"action": "getData", "username": "ana"})

        records = response.json()
        assert isinstance(records, list)
        assert records[0]["Description"] == "Bus"
        assert records[0]["_rowIndex"] == 2

    @pytest.mark.parametrize("action", ["add", "delete", "registerUser", "drop", ""])
    def test_post_only_actions_rejected_on_get(self, api, action):
        response = api.get("/", params={"action": action})
        assert response.status_code == 200
        assert response.json() == {"error": "Invalid GET action"}

    def test_missing_action(self, api):
        assert api.get("/").json() == {"error": "Invalid GET action"}


class TestPostActions:
    """Tests for JSON body actions."""

    def test_register_with_text_plain_body(self, api):
        response = post(api, {"action": "registerUser", "username": "ana", "password": "1234"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User created successfully"}

    def test_application_json_body_also_accepted(self, api):
        response = post(
            api,
            {"action": "registerUser", "username": "ana", "password": "1234"},
            content_type="application/json",
        )
        assert response.json()["success"] is True

    @pytest.mark.parametrize("action", ["checkUser", "getData", "drop", None])
    def test_get_only_actions_rejected_on_post(self, api, action):
        response = post(api, {"action": action, "username": "ana"})
        assert response.json() == {"error": "Invalid POST action"}

    def test_malformed_body(self, api):
        """Test that an unparseable body becomes an error envelope, not a 500."""
        response = api.post("/", content="{not json", headers={"Content-Type": "text/plain"})
        assert response.status_code == 200
        assert response.json()["error"].startswith("Error processing request:")

    def test_non_object_body(self, api):
        response = post(api, [1, 2, 3])
        assert response.json() == {"error": "Error processing request: body must be a JSON object"}

    def test_invalid_index_over_http(self, api):
        post(api, {"action": "add", "username": "ana", "description": "x", "amount": 1})
        response = post(api, {"action": "delete", "rowIndex": 1})
        assert response.json() == {"success": False, "error": "Invalid index"}

    def test_full_transaction_cycle(self, api):
        """Test add, update and delete end to end."""
        post(api, {"action": "add", "username": "ana", "description": "a", "amount": 1})
        post(api, {"action": "add", "username": "ana", "description": "b", "amount": 2})

        post(api, {"action": "update", "username": "ana", "rowIndex": 3, "description": "B", "amount": 20})
        post(api, {"action": "delete", "rowIndex": 2})

        records = api.get("/", params={"action": "getData", "username": "ana"}).json()
        assert [(r["Description"], r["Amount"], r["_rowIndex"]) for r in records] == [("B", 20.0, 2)]

    def test_oversized_amount_is_stored_as_zero(self, api):
        """Test that an integer amount too large for a float does not fail the add."""
        response = post(api, {"action": "add", "username": "ana", "description": "x", "amount": 10**400})
        assert response.json()["success"] is True

        records = api.get("/", params={"action": "getData", "username": "ana"}).json()
        assert records[0]["Amount"] == 0.0

    def test_completion(self, api, http_session):
        response = post(api, {"action": "callGroq", "messages": [{"role": "user", "content": "hi"}]})
        assert response.json()["choices"][0]["message"]["content"] == "Spend less 💡"
        assert http_session.post.call_count == 1


class TestRouterErrors:
    """Tests for exception containment."""

    def test_handler_exception_becomes_envelope(self):
        """Test that a failing store never escapes the router."""
        handlers = MagicMock()
        handlers.get_data.side_effect = RuntimeError("sheet exploded")
        router = ActionRouter(handlers)

        result = router.handle_get({"action": "getData", "username": "ana"})
        assert result == {"error": "Error processing request: sheet exploded"}

    def test_handle_post_accepts_mapping(self, router):
        result = router.handle_post({"action": "registerUser", "username": "ana", "password": "1234"})
        assert result["success"] is True


class TestHealth:
    def test_health(self, api):
        response = api.get("/health")
        assert response.json()["status"] == "ok"
        assert response.json()["storage_backend"] == "memory"

    def test_health_reports_configuration_flags(self, api, monkeypatch):
        """Test that each settings section is reported without its error text."""
        monkeypatch.setattr(
            "fintrack.backend.api.validate_all_settings",
            lambda: {"google_sheets": False, "google_sheets_error": "bad key sheet-123", "app": True},
        )
        response = api.get("/health")
        assert response.json()["configuration"] == {"google_sheets": False, "app": True}

    def test_health_configuration_is_flags_only(self, api):
        configuration = api.get("/health").json()["configuration"]
        assert "app" in configuration
        assert all(isinstance(ok, bool) for ok in configuration.values())
        assert not any(name.endswith("_error") for name in configuration)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
