"""
Client State Container

The whole client is described by one immutable `ClientState` snapshot.
Operations never mutate a snapshot; they build the next one with the
transition functions below and hand it to the render listener.

View modes are a closed set and only change on explicit user actions:

    login <-> register
    login --(login ok)--> dashboard <-> form
    dashboard --(logout)--> login
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from fintrack.models.transaction import Transaction


class ViewMode(str, Enum):
    """Screens the client can show."""
    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"
    FORM = "form"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A transient on-screen message."""
    model_config = ConfigDict(frozen=True)

    message: str
    kind: NotificationKind = NotificationKind.SUCCESS


class ClientState(BaseModel):
    """Snapshot of everything the UI renders from."""
    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None
    view: ViewMode = ViewMode.LOGIN
    transactions: tuple[Transaction, ...] = ()
    loading: bool = False
    insight: Optional[str] = None
    notification: Optional[Notification] = None
    # Transaction being edited in the form; None means "new"
    editing: Optional[Transaction] = None

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None

    @property
    def visible_view(self) -> ViewMode:
        """Without a user only the login/register screens can show."""
        if not self.is_authenticated and self.view not in (ViewMode.LOGIN, ViewMode.REGISTER):
            return ViewMode.LOGIN
        return self.view


# =============================================================================
# TRANSITIONS
# =============================================================================

def initial_state() -> ClientState:
    return ClientState()


def set_loading(state: ClientState, loading: bool) -> ClientState:
    return state.model_copy(update={"loading": loading})


def notify(
    state: ClientState,
    message: str,
    kind: NotificationKind = NotificationKind.SUCCESS,
) -> ClientState:
    return state.model_copy(update={"notification": Notification(message=message, kind=kind)})


def notify_error(state: ClientState, message: str) -> ClientState:
    return notify(state, message, NotificationKind.ERROR)


def clear_notification(state: ClientState) -> ClientState:
    return state.model_copy(update={"notification": None})


def navigate(state: ClientState, view: ViewMode) -> ClientState:
    """Switch screens; leaving the form forgets the edited transaction."""
    update = {"view": view}
    if view != ViewMode.FORM:
        update["editing"] = None
    return state.model_copy(update=update)


def open_form(state: ClientState, transaction: Optional[Transaction] = None) -> ClientState:
    return state.model_copy(update={"view": ViewMode.FORM, "editing": transaction})


def logged_in(state: ClientState, username: str) -> ClientState:
    return state.model_copy(update={"username": username, "view": ViewMode.DASHBOARD})


def sort_newest_first(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    """Order by date descending; undated rows go last."""
    return tuple(sorted(transactions, key=lambda t: t.sort_date, reverse=True))


def transactions_loaded(state: ClientState, transactions: Iterable[Transaction]) -> ClientState:
    return state.model_copy(update={"transactions": sort_newest_first(transactions)})


def insight_ready(state: ClientState, text: Optional[str]) -> ClientState:
    return state.model_copy(update={"insight": text})
