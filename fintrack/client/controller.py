"""
Client Controller

Owns the current `ClientState` and runs every user-facing operation:

    1. mark loading
    2. call the gateway
    3. fold the answer into a new state
    4. clear loading, notify, hand the state to the listener

The listener is the render step. It is called after every state change,
so a UI only needs to draw whatever `state` holds.

Every operation swallows transport failures into an error notification;
nothing here raises to the UI.
"""

from datetime import date
from typing import Any, Callable, Mapping, Optional

import structlog
from pydantic import ValidationError

from fintrack.client import state as transitions
from fintrack.client.gateway import ApiGateway, GatewayError
from fintrack.client.insights import (
    FALLBACK_INSIGHT,
    build_insight_messages,
    extract_insight,
)
from fintrack.client.session import SessionStore
from fintrack.client.state import ClientState, ViewMode
from fintrack.config import ClientSettings, get_settings
from fintrack.models.transaction import DEFAULT_CATEGORY, Transaction, parse_amount


logger = structlog.get_logger(__name__)

Listener = Callable[[ClientState], None]


# User-facing messages
FILL_ALL_FIELDS = "Fill in all fields"
WELCOME_BACK = "Welcome back!"
INVALID_LOGIN = "Invalid login"
USERNAME_TOO_SHORT = "Username must be at least 3 characters"
PASSWORD_TOO_SHORT = "Password must be at least 4 characters"
ACCOUNT_CREATED = "Account created! Log in now"
REGISTER_FAILED = "Error creating account"
ENTER_VALID_AMOUNT = "Enter a valid amount"
ENTER_DESCRIPTION = "Enter a description"
SAVE_SUCCEEDED = "Transaction saved successfully!"
REMOVE_SUCCEEDED = "Transaction removed!"
INSIGHTS_FAILED = "Error generating insights"

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4


def is_failure(body: Any) -> bool:
    """
    Whether an action body reports failure.

    An explicit `success: false` or an `error` field counts; a body with
    neither is taken as success.
    """
    if not isinstance(body, dict):
        return True
    return body.get("success") is False or "error" in body


def failure_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or default
    return default


class ClientController:
    """
    Drives the client.

    Example:
        controller = ClientController(on_change=render)
        controller.start()
        controller.login("ana", "1234")
    """

    def __init__(
        self,
        gateway: Optional[ApiGateway] = None,
        session_store: Optional[SessionStore] = None,
        settings: Optional[ClientSettings] = None,
        on_change: Optional[Listener] = None,
    ):
        self.settings = settings or get_settings().client
        self.gateway = gateway or ApiGateway(self.settings)
        self.session_store = session_store or SessionStore(self.settings.session_path)
        self._on_change = on_change
        self._state = transitions.initial_state()

    @property
    def state(self) -> ClientState:
        return self._state

    def _set(self, new_state: ClientState) -> None:
        self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)

    def _loading(self, loading: bool) -> None:
        self._set(transitions.set_loading(self._state, loading))

    def _notify(self, message: str) -> None:
        self._set(transitions.notify(self._state, message))

    def _error(self, message: str) -> None:
        self._set(transitions.notify_error(self._state, message))

    # =========================================================================
    # SESSION
    # =========================================================================

    def start(self) -> None:
        """Restore a remembered user, or show the login screen."""
        username = self.session_store.load()
        if username:
            logger.info("session_restored", username=username)
            self._set(transitions.logged_in(self._state, username))
            self.load_data()
        else:
            self._set(self._state)

    def login(self, username: str, password: str) -> bool:
        username = (username or "").strip()
        if not username or not password:
            self._error(FILL_ALL_FIELDS)
            return False

        logged_in = False
        self._loading(True)
        try:
            result = self.gateway.check_user(username, password)
            if isinstance(result, dict) and result.get("success"):
                user = result.get("username") or username
                self.session_store.save(user)
                self._set(transitions.logged_in(self._state, user))
                self._notify(WELCOME_BACK)
                logged_in = True
            else:
                self._error(failure_message(result, INVALID_LOGIN))
        except GatewayError as e:
            self._error(f"Connection error: {e}")
        finally:
            self._loading(False)

        if logged_in:
            self.load_data()
        return logged_in

    def register(self, username: str, password: str) -> bool:
        username = (username or "").strip()
        if not username or not password:
            self._error(FILL_ALL_FIELDS)
            return False
        if len(username) < MIN_USERNAME_LENGTH:
            self._error(USERNAME_TOO_SHORT)
            return False
        if len(password) < MIN_PASSWORD_LENGTH:
            self._error(PASSWORD_TOO_SHORT)
            return False

        self._loading(True)
        try:
            result = self.gateway.register_user(username, password)
            if isinstance(result, dict) and result.get("success"):
                self._set(transitions.navigate(self._state, ViewMode.LOGIN))
                self._notify(ACCOUNT_CREATED)
                return True
            self._error(failure_message(result, REGISTER_FAILED))
            return False
        except GatewayError as e:
            self._error(f"Connection error: {e}")
            return False
        finally:
            self._loading(False)

    def logout(self) -> None:
        self.session_store.clear()
        self._set(transitions.initial_state())

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def load_data(self) -> None:
        """Replace the transaction list with a fresh read, newest first."""
        username = self._state.username
        if not username:
            return

        self._loading(True)
        try:
            result = self.gateway.get_data(username)
            if isinstance(result, list):
                records = [
                    Transaction.from_record(record)
                    for record in result
                    if isinstance(record, dict)
                ]
                self._set(transitions.transactions_loaded(self._state, records))
            else:
                self._error(failure_message(result, "Could not load transactions"))
        except GatewayError as e:
            self._error(f"Could not load transactions: {e}")
        finally:
            self._loading(False)

    def validate_form(self, form: Mapping[str, Any]) -> Optional[str]:
        """Return the first problem with a form, or None when it can be sent."""
        if parse_amount(form.get("amount")) <= 0:
            return ENTER_VALID_AMOUNT
        if not str(form.get("description") or "").strip():
            return ENTER_DESCRIPTION
        return None

    def submit_form(self, form: Mapping[str, Any]) -> bool:
        """
        Validate the form locally and save it.

        Nothing is sent when validation fails. The row index comes from
        the transaction being edited, if any.
        """
        problem = self.validate_form(form)
        if problem:
            self._error(problem)
            return False

        editing = self._state.editing
        try:
            transaction = Transaction(
                id=editing.id if editing else None,
                date=str(form.get("date") or date.today().isoformat()),
                description=str(form.get("description")),
                amount=parse_amount(form.get("amount")),
                type=form.get("type") or "expense",
                method=form.get("method") or "credit",
                card=form.get("card") or "other",
                category=str(form.get("category") or DEFAULT_CATEGORY),
            )
        except ValidationError as e:
            self._error(f"Invalid transaction: {e.errors()[0]['msg']}")
            return False

        return self.save_transaction(transaction)

    def save_transaction(self, transaction: Transaction) -> bool:
        username = self._state.username
        if not username:
            return False

        saved = False
        self._loading(True)
        try:
            result = self.gateway.save_transaction(username, transaction)
            if is_failure(result):
                self._error(f"Error saving: {failure_message(result, 'unknown error')}")
            else:
                saved = True
        except GatewayError as e:
            self._error(f"Error saving: {e}")
        finally:
            self._loading(False)

        if saved:
            self.load_data()
            self._set(transitions.navigate(self._state, ViewMode.DASHBOARD))
            self._notify(SAVE_SUCCEEDED)
        return saved

    def delete_transaction(self, row_index: int) -> bool:
        """Delete by row position. Confirmation is the UI's job."""
        removed = False
        self._loading(True)
        try:
            result = self.gateway.delete_transaction(row_index)
            if is_failure(result):
                self._error(f"Error removing: {failure_message(result, 'unknown error')}")
            else:
                removed = True
        except GatewayError as e:
            self._error(f"Error removing: {e}")
        finally:
            self._loading(False)

        if removed:
            self.load_data()
            self._notify(REMOVE_SUCCEEDED)
        return removed

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    def fetch_insights(self) -> None:
        messages = build_insight_messages(
            self._state.transactions,
            limit=self.settings.insight_transaction_limit,
            currency_symbol=self.settings.currency_symbol,
        )
        self._loading(True)
        try:
            result = self.gateway.call_completion(messages)
            self._set(transitions.insight_ready(self._state, extract_insight(result) or FALLBACK_INSIGHT))
        except GatewayError as e:
            logger.warning("insights_failed", error=str(e))
            self._error(INSIGHTS_FAILED)
        finally:
            self._loading(False)

    def dismiss_insight(self) -> None:
        self._set(transitions.insight_ready(self._state, None))

    def take_insight(self) -> Optional[str]:
        """Pending insight text, cleared so it is shown once per fetch."""
        insight = self._state.insight
        if insight is not None:
            self.dismiss_insight()
        return insight

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def show_login(self) -> None:
        self._set(transitions.navigate(self._state, ViewMode.LOGIN))

    def show_register(self) -> None:
        self._set(transitions.navigate(self._state, ViewMode.REGISTER))

    def open_form(self, transaction: Optional[Transaction] = None) -> None:
        self._set(transitions.open_form(self._state, transaction))

    def back_to_dashboard(self) -> None:
        self._set(transitions.navigate(self._state, ViewMode.DASHBOARD))

    def dismiss_notification(self) -> None:
        self._set(transitions.clear_notification(self._state))
