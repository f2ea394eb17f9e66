"""
Action Handlers

One method per backend action. Every handler:
1. Makes sure both tables exist (idempotent)
2. Does a single scan or a single write against the store
3. Answers with the shared envelope

KNOWN LIMITATIONS (accepted, not remedied):
- Username uniqueness is a linear scan before append. Two concurrent
  registrations of the same name can both succeed.
- Update/delete address rows by position and check no ownership. A delete
  shifts every later row up; positions the client holds go stale until
  the next getData.
"""

from datetime import datetime
from typing import Any, Callable, Mapping, Optional
from uuid import UUID

from fintrack.audit import AuditLogger, get_audit_logger
from fintrack.models.api import ActionResponse, CompletionRequest, HandlerResult
from fintrack.models.audit import AuditEventBuilder
from fintrack.models.transaction import (
    FIRST_DATA_ROW,
    TRANSACTION_COLUMNS,
    USER_COLUMNS,
    TransactionPayload,
    UserRecord,
)
from fintrack.services.completion import GroqCompletionService
from fintrack.services.storage import InvalidRowError, NotFoundError, TabularStore


DEFAULT_USERS_TABLE = "Users"
DEFAULT_TRANSACTIONS_TABLE = "Transactions"

# User-facing messages
LOGIN_FAILED = "Invalid username or password"
USER_EXISTS = "User already exists"
CREDENTIALS_REQUIRED = "Username and password are required"
USER_CREATED = "User created successfully"
USERNAME_MISSING = "Username not provided"
INVALID_INDEX = "Invalid index"
TRANSACTION_ADDED = "Transaction added"
TRANSACTION_UPDATED = "Transaction updated"
TRANSACTION_REMOVED = "Transaction removed"


def parse_row_index(raw: Any) -> Optional[int]:
    """
    Interpret a rowIndex field.

    Returns the row position, or None when the value is missing,
    non-numeric, fractional, or addresses the header (<= 1).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw.lstrip("-").isdigit():
            return None
        raw = int(raw)
    if not isinstance(raw, int):
        return None
    if raw < FIRST_DATA_ROW:
        return None
    return raw


class ActionHandlers:
    """
    Stateless action handlers over a two-table store.

    The store is the only shared mutable resource. Handlers keep no
    memory between requests.
    """

    def __init__(
        self,
        store: TabularStore,
        completion_service: Optional[GroqCompletionService] = None,
        users_table: str = DEFAULT_USERS_TABLE,
        transactions_table: str = DEFAULT_TRANSACTIONS_TABLE,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._store = store
        self._completion = completion_service
        self._users_table = users_table
        self._transactions_table = transactions_table
        self._audit = audit_logger or get_audit_logger()
        self._clock = clock

    def _ensure_tables(self) -> None:
        """Create Users and Transactions with their header rows if absent."""
        if self._store.ensure_table(self._users_table, USER_COLUMNS):
            self._audit.log(AuditEventBuilder.table_created(self._users_table, USER_COLUMNS))
        if self._store.ensure_table(self._transactions_table, TRANSACTION_COLUMNS):
            self._audit.log(
                AuditEventBuilder.table_created(self._transactions_table, TRANSACTION_COLUMNS)
            )

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    def check_user(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Exact match of username and password against the Users table."""
        self._ensure_tables()
        username = params.get("username")
        password = params.get("password")

        rows = self._store.read_all(self._users_table)
        for row in rows[1:]:
            if len(row) >= 2 and row[0] == username and row[1] == password:
                self._audit.log(AuditEventBuilder.user_authenticated(username, correlation_id))
                return ActionResponse.ok(username=username)

        self._audit.log(AuditEventBuilder.login_failed(username, correlation_id))
        return ActionResponse.fail(message=LOGIN_FAILED)

    def register_user(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Append a new user unless the username is already taken."""
        self._ensure_tables()
        username = params.get("username")
        password = params.get("password")

        if not username or not password:
            self._audit.log(
                AuditEventBuilder.registration_rejected(username, "missing credentials", correlation_id)
            )
            return ActionResponse.fail(message=CREDENTIALS_REQUIRED)

        rows = self._store.read_all(self._users_table)
        for row in rows[1:]:
            if row and row[0] == username:
                self._audit.log(
                    AuditEventBuilder.registration_rejected(username, "duplicate username", correlation_id)
                )
                return ActionResponse.fail(message=USER_EXISTS)

        user = UserRecord(
            username=str(username),
            password=str(password),
            created_at=self._clock(),
        )
        self._store.append_row(self._users_table, user.to_row())
        self._audit.log(AuditEventBuilder.user_registered(user.username, correlation_id))
        return ActionResponse.ok(message=USER_CREATED)

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def get_data(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """
        Every transaction owned by `username`, keyed by header name.

        Each record carries its row position as `_rowIndex`.
        """
        username = params.get("username")
        if not username:
            return ActionResponse.failure(USERNAME_MISSING)

        self._ensure_tables()
        rows = self._store.read_all(self._transactions_table)
        if len(rows) <= 1:
            return []

        headers = rows[0]
        records = []
        for position, row in enumerate(rows[1:], start=FIRST_DATA_ROW):
            if not row or row[0] != username:
                continue
            item = {
                header: row[idx] if idx < len(row) else ""
                for idx, header in enumerate(headers)
            }
            item["_rowIndex"] = position
            records.append(item)

        self._audit.log(AuditEventBuilder.data_read(username, len(records), correlation_id))
        return records

    def add_transaction(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Append one transaction row; amount is coerced, nothing is validated."""
        self._ensure_tables()
        payload = TransactionPayload.model_validate(dict(params))
        self._store.append_row(self._transactions_table, payload.to_row())
        self._audit.log(
            AuditEventBuilder.transaction_added(payload.username, payload.amount, correlation_id)
        )
        return ActionResponse.ok(message=TRANSACTION_ADDED)

    def update_transaction(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Overwrite all eight cells of the row at `rowIndex`."""
        self._ensure_tables()
        payload = TransactionPayload.model_validate(dict(params))
        row_index = parse_row_index(payload.row_index)
        if row_index is None:
            self._audit.log(
                AuditEventBuilder.invalid_row_index("update", payload.row_index, correlation_id)
            )
            return ActionResponse.fail(error=INVALID_INDEX)

        try:
            self._store.overwrite_row(self._transactions_table, row_index, payload.to_row())
        except InvalidRowError:
            return ActionResponse.fail(error=INVALID_INDEX)
        except NotFoundError as e:
            return ActionResponse.fail(error=str(e))

        self._audit.log(
            AuditEventBuilder.transaction_updated(payload.username, row_index, correlation_id)
        )
        return ActionResponse.ok(message=TRANSACTION_UPDATED)

    def delete_transaction(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Physically remove the row at `rowIndex`; later rows shift up."""
        self._ensure_tables()
        raw_index = params.get("rowIndex")
        row_index = parse_row_index(raw_index)
        if row_index is None:
            self._audit.log(AuditEventBuilder.invalid_row_index("delete", raw_index, correlation_id))
            return ActionResponse.fail(error=INVALID_INDEX)

        try:
            self._store.delete_row(self._transactions_table, row_index)
        except InvalidRowError:
            return ActionResponse.fail(error=INVALID_INDEX)
        except NotFoundError as e:
            return ActionResponse.fail(error=str(e))

        self._audit.log(
            AuditEventBuilder.transaction_deleted(params.get("username"), row_index, correlation_id)
        )
        return ActionResponse.ok(message=TRANSACTION_REMOVED)

    # =========================================================================
    # COMPLETION
    # =========================================================================

    def call_completion(self, params: Mapping[str, Any], correlation_id: UUID) -> HandlerResult:
        """Proxy chat messages to the completion endpoint."""
        if self._completion is None:
            self._completion = GroqCompletionService()
        request = CompletionRequest.model_validate(dict(params))
        return self._completion.complete(request.messages, correlation_id=correlation_id)
