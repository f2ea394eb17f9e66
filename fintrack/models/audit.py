"""
Audit Models for Fintrack

Every backend action produces an audit event describing its outcome.
This provides:
1. Traceability of who touched which row
2. Debugging information when a request degrades to an error envelope
3. A correlation ID tying all events of one request together

DESIGN DECISION: Audit events never carry passwords or message bodies.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Routing
    ACTION_RECEIVED = "action_received"
    ACTION_REJECTED = "action_rejected"

    # Authentication
    USER_AUTHENTICATED = "user_authenticated"
    LOGIN_FAILED = "login_failed"
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"

    # Transactions
    DATA_READ = "data_read"
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    INVALID_ROW_INDEX = "invalid_row_index"

    # Storage
    TABLE_CREATED = "table_created"

    # Completion
    COMPLETION_REQUESTED = "completion_requested"
    COMPLETION_FAILED = "completion_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Who and what
    username: Optional[str] = None
    action: Optional[str] = None
    row_index: Optional[int] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by every event of one request"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    @field_validator("username", "action", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Optional[str]:
        # Request bodies are untrusted JSON; names may arrive as numbers
        return None if v is None else str(v)

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "action": self.action,
            "row_index": self.row_index,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered("ana", correlation_id)
        event = AuditEventBuilder.transaction_deleted("ana", 7, correlation_id)
    """

    @staticmethod
    def action_received(action: str, method: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_RECEIVED,
            severity=AuditSeverity.DEBUG,
            action=action,
            correlation_id=correlation_id,
            description=f"{method} action received: {action}",
            details={"method": method},
        )

    @staticmethod
    def action_rejected(action: Optional[str], method: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            action=action,
            correlation_id=correlation_id,
            description=f"Unknown {method} action: {str(action)[:100]!r}",
            details={"method": method},
        )

    @staticmethod
    def user_authenticated(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_AUTHENTICATED,
            username=username,
            correlation_id=correlation_id,
            description=f"User logged in: {username}",
        )

    @staticmethod
    def login_failed(username: Optional[str], correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            username=username,
            correlation_id=correlation_id,
            description="Login rejected: username or password mismatch",
        )

    @staticmethod
    def user_registered(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            username=username,
            correlation_id=correlation_id,
            description=f"User registered: {username}",
        )

    @staticmethod
    def registration_rejected(
        username: Optional[str],
        reason: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            username=username,
            correlation_id=correlation_id,
            description=f"Registration rejected: {reason}",
        )

    @staticmethod
    def data_read(username: str, row_count: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_READ,
            severity=AuditSeverity.DEBUG,
            username=username,
            correlation_id=correlation_id,
            description=f"Returned {row_count} transactions",
            details={"row_count": row_count},
        )

    @staticmethod
    def transaction_added(username: Any, amount: float, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            username=str(username) if username is not None else None,
            correlation_id=correlation_id,
            description="Transaction appended",
            details={"amount": amount},
        )

    @staticmethod
    def transaction_updated(username: Any, row_index: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            username=str(username) if username is not None else None,
            row_index=row_index,
            correlation_id=correlation_id,
            description=f"Row {row_index} overwritten",
        )

    @staticmethod
    def transaction_deleted(username: Any, row_index: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            username=str(username) if username is not None else None,
            row_index=row_index,
            correlation_id=correlation_id,
            description=f"Row {row_index} deleted",
        )

    @staticmethod
    def invalid_row_index(action: str, raw_index: Any, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_ROW_INDEX,
            severity=AuditSeverity.WARNING,
            action=action,
            correlation_id=correlation_id,
            description=f"Rejected row index {str(raw_index)[:100]!r}",
        )

    @staticmethod
    def table_created(table: str, columns: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TABLE_CREATED,
            description=f"Created table {table}",
            details={"columns": columns},
        )

    @staticmethod
    def completion_requested(message_count: int, model: str, correlation_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPLETION_REQUESTED,
            action="callGroq",
            correlation_id=correlation_id,
            description=f"Forwarding {message_count} messages to {model}",
            details={"message_count": message_count, "model": model},
        )

    @staticmethod
    def completion_failed(error_message: str, correlation_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPLETION_FAILED,
            severity=AuditSeverity.ERROR,
            action="callGroq",
            correlation_id=correlation_id,
            description="Completion endpoint call failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        action: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            action=action,
            correlation_id=correlation_id,
            description=f"Unhandled {error_type}",
            error_message=error_message,
        )
