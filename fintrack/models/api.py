"""
Request/Response Models for the Action API

Every backend action answers with the same envelope: an optional
`success` flag plus a human-readable `message` and/or `error`.
There are no machine-readable error codes.

Two actions break the envelope on success:
- getData returns a bare list of row objects
- callGroq returns the completion endpoint's JSON untouched
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Action(str, Enum):
    """The `action` discriminator understood by the backend."""
    CHECK_USER = "checkUser"
    GET_DATA = "getData"
    REGISTER_USER = "registerUser"
    CALL_COMPLETION = "callGroq"
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: Any) -> Optional["Action"]:
        """Return the matching action, or None for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


# Which transport each action travels on
GET_ACTIONS = frozenset({Action.CHECK_USER, Action.GET_DATA})
POST_ACTIONS = frozenset({
    Action.REGISTER_USER,
    Action.CALL_COMPLETION,
    Action.ADD,
    Action.UPDATE,
    Action.DELETE,
})


class ActionResponse(BaseModel):
    """The shared response envelope."""

    success: Optional[bool] = None
    username: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: Optional[str] = None, **extra) -> "ActionResponse":
        return cls(success=True, message=message, **extra)

    @classmethod
    def fail(
        cls,
        message: Optional[str] = None,
        error: Optional[str] = None,
    ) -> "ActionResponse":
        return cls(success=False, message=message, error=error)

    @classmethod
    def failure(cls, error: str) -> "ActionResponse":
        """Error-only envelope (no success flag), used for routing failures."""
        return cls(error=error)

    def to_body(self) -> dict:
        """JSON body with unset fields omitted."""
        return self.model_dump(exclude_none=True)


# What a handler may hand back to the router
HandlerResult = Union[ActionResponse, list, dict]


class ChatMessage(BaseModel):
    """One chat-style message for the completion endpoint."""
    model_config = ConfigDict(extra="allow")

    role: str = Field(..., description="system, user or assistant")
    content: str = Field(..., description="Message text")


class CompletionRequest(BaseModel):
    """Body of a callGroq action."""
    model_config = ConfigDict(extra="ignore")

    messages: list[ChatMessage] = Field(default_factory=list)
