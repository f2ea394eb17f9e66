"""
Action Router

Dispatches an inbound request to exactly one handler, selected by the
`action` field, through an explicit dispatch table keyed by `Action`.

GET carries checkUser/getData in the query string.
POST carries everything else as a JSON body.

The router never lets an exception escape: anything a handler does not
convert into an envelope itself becomes {"error": "..."} here.
"""

import json
from typing import Any, Callable, Mapping, Optional, Union
from uuid import UUID

from fintrack.audit import AuditLogger, create_correlation_id, get_audit_logger
from fintrack.backend.handlers import ActionHandlers
from fintrack.models.api import (
    GET_ACTIONS,
    POST_ACTIONS,
    Action,
    ActionResponse,
    HandlerResult,
)
from fintrack.models.audit import AuditEventBuilder


Handler = Callable[[Mapping[str, Any], UUID], HandlerResult]

INVALID_GET_ACTION = "Invalid GET action"
INVALID_POST_ACTION = "Invalid POST action"
REQUEST_FAILED = "Error processing request"


def to_body(result: HandlerResult) -> Union[dict, list]:
    """Turn a handler result into a JSON-compatible body."""
    if isinstance(result, ActionResponse):
        return result.to_body()
    return result


class ActionRouter:
    """
    Maps actions to handlers.

    Each call is independent: a fresh correlation ID, no state carried
    over from previous requests.
    """

    def __init__(
        self,
        handlers: ActionHandlers,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._audit = audit_logger or get_audit_logger()
        self._dispatch: dict[Action, Handler] = {
            Action.CHECK_USER: handlers.check_user,
            Action.GET_DATA: handlers.get_data,
            Action.REGISTER_USER: handlers.register_user,
            Action.CALL_COMPLETION: handlers.call_completion,
            Action.ADD: handlers.add_transaction,
            Action.UPDATE: handlers.update_transaction,
            Action.DELETE: handlers.delete_transaction,
        }

    def _run(
        self,
        action: Action,
        params: Mapping[str, Any],
        method: str,
        correlation_id: UUID,
    ) -> Union[dict, list]:
        self._audit.log(AuditEventBuilder.action_received(action.value, method, correlation_id))
        try:
            return to_body(self._dispatch[action](params, correlation_id))
        except Exception as e:
            self._audit.log(
                AuditEventBuilder.system_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    action=action.value,
                    correlation_id=correlation_id,
                )
            )
            return ActionResponse.failure(f"{REQUEST_FAILED}: {e}").to_body()

    def handle_get(self, params: Mapping[str, Any]) -> Union[dict, list]:
        """Handle a query-string request."""
        correlation_id = create_correlation_id()
        raw_action = params.get("action")
        action = Action.parse(raw_action)

        if action not in GET_ACTIONS:
            self._audit.log(AuditEventBuilder.action_rejected(raw_action, "GET", correlation_id))
            return ActionResponse.failure(INVALID_GET_ACTION).to_body()

        return self._run(action, params, "GET", correlation_id)

    def handle_post(self, body: Union[bytes, str, Mapping[str, Any]]) -> Union[dict, list]:
        """
        Handle a JSON body request.

        The body is parsed here rather than by the web framework because
        browser clients send it as text/plain.
        """
        correlation_id = create_correlation_id()

        try:
            data = body if isinstance(body, Mapping) else json.loads(body or b"")
        except ValueError as e:
            self._audit.log(
                AuditEventBuilder.system_error("JSONDecodeError", str(e), correlation_id=correlation_id)
            )
            return ActionResponse.failure(f"{REQUEST_FAILED}: {e}").to_body()

        if not isinstance(data, Mapping):
            return ActionResponse.failure(
                f"{REQUEST_FAILED}: body must be a JSON object"
            ).to_body()

        raw_action = data.get("action")
        action = Action.parse(raw_action)
        if action not in POST_ACTIONS:
            self._audit.log(AuditEventBuilder.action_rejected(raw_action, "POST", correlation_id))
            return ActionResponse.failure(INVALID_POST_ACTION).to_body()

        return self._run(action, data, "POST", correlation_id)
