"""
Client API Gateway

Thin request layer between the client controller and the backend action
endpoint. One method per backend action; each returns the parsed JSON
body as-is so the caller can inspect `success`/`message`/`error`.

Transport problems (connection refused, timeouts, non-2xx, undecodable
body) are raised as `GatewayError`. Application-level failures are NOT
raised - they arrive as ordinary bodies.
"""

import time
from typing import Any, Optional, Union

import requests
import structlog

from fintrack.config import ClientSettings, get_settings
from fintrack.models.api import Action
from fintrack.models.transaction import Transaction


logger = structlog.get_logger(__name__)


class GatewayError(Exception):
    """The backend could not be reached or answered garbage."""
    pass


class ApiGateway:
    """
    Talks to the backend over HTTP.

    Example:
        gateway = ApiGateway()
        gateway.check_user("ana", "1234")
        # {"success": True, "username": "ana"}
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings().client
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self.settings.api_url

    def _decode(self, response: requests.Response) -> Union[dict, list]:
        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise GatewayError(f"Backend returned HTTP {response.status_code}") from e
        except ValueError as e:
            raise GatewayError("Backend returned an invalid response") from e

    def _get(self, params: dict) -> Union[dict, list]:
        try:
            response = self._session.get(
                self.base_url,
                params=params,
                timeout=self.settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning("gateway_request_failed", method="GET", action=params.get("action"), error=str(e))
            raise GatewayError(str(e)) from e
        return self._decode(response)

    def _post(self, body: dict) -> Union[dict, list]:
        try:
            response = self._session.post(
                self.base_url,
                json=body,
                timeout=self.settings.request_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning("gateway_request_failed", method="POST", action=body.get("action"), error=str(e))
            raise GatewayError(str(e)) from e
        return self._decode(response)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def check_user(self, username: str, password: str) -> dict:
        # Timestamp keeps intermediaries from serving a cached login answer
        return self._get({
            "action": Action.CHECK_USER.value,
            "username": username,
            "password": password,
            "timestamp": int(time.time() * 1000),
        })

    def register_user(self, username: str, password: str) -> dict:
        return self._post({
            "action": Action.REGISTER_USER.value,
            "username": username,
            "password": password,
        })

    def get_data(self, username: str) -> Union[list, dict]:
        return self._get({"action": Action.GET_DATA.value, "username": username})

    def save_transaction(self, username: str, transaction: Transaction) -> dict:
        """
        Add or update depending on whether the transaction has a row index.

        A falsy id (None or 0) means "new".
        """
        action = Action.UPDATE if transaction.id else Action.ADD
        return self._post({"action": action.value, **transaction.to_payload(username)})

    def delete_transaction(self, row_index: int) -> dict:
        return self._post({"action": Action.DELETE.value, "rowIndex": row_index})

    def call_completion(self, messages: list[dict[str, Any]]) -> dict:
        return self._post({"action": Action.CALL_COMPLETION.value, "messages": messages})
