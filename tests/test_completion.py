"""
Tests for the completion proxy.

The HTTP session is a mock, so outbound calls can be counted.
"""

import pytest
import requests

from fintrack.config import GroqSettings
from fintrack.services.completion import GroqCompletionService, NOT_CONFIGURED_ERROR


MESSAGES = [
    {"role": "system", "content": "You are a personal finance advisor."},
    {"role": "user", "content": "My transactions: ..."},
]


@pytest.fixture
def unconfigured(http_session):
    return GroqCompletionService(settings=GroqSettings(api_key=None), session=http_session)


class TestCompletionProxy:
    """Tests for GroqCompletionService."""

    def test_missing_key_makes_no_call(self, unconfigured, http_session):
        """Test that no request leaves the process without a key."""
        assert unconfigured.complete(MESSAGES) == {"error": NOT_CONFIGURED_ERROR}
        assert http_session.post.call_count == 0

    def test_request_shape(self, completion_service, http_session):
        """Test model, sampling parameters and bearer auth."""
        completion_service.complete(MESSAGES)

        args, kwargs = http_session.post.call_args
        assert args[0] == "https://api.groq.com/openai/v1/chat/completions"
        assert kwargs["headers"] == {"Authorization": "Bearer test-key"}
        assert kwargs["json"] == {
            "model": "llama-3.1-70b-versatile",
            "messages": MESSAGES,
            "temperature": 0.7,
            "max_tokens": 1000,
        }

    def test_returns_body_untouched(self, completion_service, http_session):
        body = {"id": "x", "choices": [{"message": {"content": "ok"}}], "usage": {"total_tokens": 5}}
        http_session.post.return_value.json.return_value = body
        assert completion_service.complete(MESSAGES) == body

    def test_single_call_no_retry(self, completion_service, http_session):
        """Test that a transport failure is reported after exactly one attempt."""
        http_session.post.side_effect = requests.ConnectionError("refused")

        result = completion_service.complete(MESSAGES)

        assert result == {"error": "Failed to reach completion API: refused"}
        assert http_session.post.call_count == 1

    def test_undecodable_body(self, completion_service, http_session):
        http_session.post.return_value.json.side_effect = ValueError("no json")
        assert completion_service.complete(MESSAGES)["error"].startswith("Failed to reach completion API")

    def test_upstream_error_normalized(self, completion_service, http_session):
        """Test that an error body from the endpoint is flattened to a message."""
        http_session.post.return_value.json.return_value = {
            "error": {"message": "Invalid API Key", "type": "invalid_request_error"}
        }
        assert completion_service.complete(MESSAGES) == {"error": "Invalid API Key"}

    def test_non_object_body(self, completion_service, http_session):
        http_session.post.return_value.json.return_value = ["?"]
        assert completion_service.complete(MESSAGES) == {"error": "Unexpected response from completion API"}

    def test_invalid_messages(self, completion_service, http_session):
        result = completion_service.complete([{"role": "user"}])
        assert result["error"].startswith("Invalid messages")
        assert http_session.post.call_count == 0

    def test_default_session(self):
        """Test that a real requests session is created when none is given."""
        service = GroqCompletionService(settings=GroqSettings(api_key="k"))
        assert isinstance(service._session, requests.Session)
        assert service.is_configured


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
