"""
Data Models Package

This package contains all Pydantic models used in Fintrack.
All data flowing between client, backend and spreadsheet conforms to these schemas.
"""

from fintrack.models.transaction import (
    CATEGORY_SUGGESTIONS,
    DEFAULT_CATEGORY,
    FIRST_DATA_ROW,
    TRANSACTION_COLUMNS,
    USER_COLUMNS,
    CardIssuer,
    PaymentMethod,
    Transaction,
    TransactionPayload,
    TransactionType,
    UserRecord,
    parse_amount,
)
from fintrack.models.api import (
    GET_ACTIONS,
    POST_ACTIONS,
    Action,
    ActionResponse,
    ChatMessage,
    CompletionRequest,
    HandlerResult,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Table layout
    "CATEGORY_SUGGESTIONS",
    "DEFAULT_CATEGORY",
    "FIRST_DATA_ROW",
    "TRANSACTION_COLUMNS",
    "USER_COLUMNS",
    # Transaction models
    "CardIssuer",
    "PaymentMethod",
    "Transaction",
    "TransactionPayload",
    "TransactionType",
    "UserRecord",
    "parse_amount",
    # API models
    "GET_ACTIONS",
    "POST_ACTIONS",
    "Action",
    "ActionResponse",
    "ChatMessage",
    "CompletionRequest",
    "HandlerResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
