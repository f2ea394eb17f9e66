"""
Completion Proxy for the Groq Chat Completions API

Forwards a list of chat messages to an OpenAI-compatible completions
endpoint and hands the endpoint's JSON back untouched.

BOUNDARIES:
- Single blocking call per invocation: no retry, no streaming
- No timeout override unless GROQ_TIMEOUT_SECONDS is set
- A missing API key short-circuits before any network traffic
- Failures are normalized to {"error": message}; nothing is raised
"""

from typing import Any, Optional, Union
from uuid import UUID

import requests

from fintrack.audit import get_audit_logger
from fintrack.config import GroqSettings, get_settings
from fintrack.models.api import ChatMessage
from fintrack.models.audit import AuditEventBuilder


NOT_CONFIGURED_ERROR = "Completion API key not configured"


class CompletionError(Exception):
    """Base exception for completion endpoint errors."""
    pass


class GroqCompletionService:
    """
    Thin proxy in front of the completion endpoint.

    The HTTP session is injectable so tests can count outbound calls.
    """

    def __init__(
        self,
        settings: Optional[GroqSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings or get_settings().groq
        self._session = session or requests.Session()
        self._audit = get_audit_logger()

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def _build_payload(self, messages: list[ChatMessage]) -> dict:
        return {
            "model": self._settings.model_name,
            "messages": [message.model_dump() for message in messages],
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

    def _post(self, payload: dict) -> Any:
        """Issue the request and decode the body; raise CompletionError on transport failure."""
        try:
            response = self._session.post(
                self._settings.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._settings.api_key}"},
                timeout=self._settings.timeout_seconds,
            )
            # Error statuses still carry a JSON error body worth returning
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise CompletionError(str(e))

    def complete(
        self,
        messages: list[Union[ChatMessage, dict]],
        correlation_id: Optional[UUID] = None,
    ) -> dict:
        """
        Forward messages to the completion endpoint.

        Returns:
            The endpoint's parsed JSON on success, otherwise {"error": message}
        """
        if not self.is_configured:
            self._audit.log(
                AuditEventBuilder.completion_failed(NOT_CONFIGURED_ERROR, correlation_id)
            )
            return {"error": NOT_CONFIGURED_ERROR}

        try:
            chat = [
                m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m)
                for m in messages
            ]
        except ValueError as e:
            return {"error": f"Invalid messages: {e}"}

        self._audit.log(
            AuditEventBuilder.completion_requested(
                len(chat), self._settings.model_name, correlation_id
            )
        )

        try:
            body = self._post(self._build_payload(chat))
        except CompletionError as e:
            message = f"Failed to reach completion API: {e}"
            self._audit.log(AuditEventBuilder.completion_failed(message, correlation_id))
            return {"error": message}

        if not isinstance(body, dict):
            message = "Unexpected response from completion API"
            self._audit.log(AuditEventBuilder.completion_failed(message, correlation_id))
            return {"error": message}

        if body.get("error"):
            error = body["error"]
            message = None
            if isinstance(error, dict):
                message = error.get("message")
            elif isinstance(error, str):
                message = error
            message = message or "Completion API error"
            self._audit.log(AuditEventBuilder.completion_failed(message, correlation_id))
            return {"error": message}

        return body
