"""
Tests for the client controller.

Most tests run the controller against the real backend app in-process:
the gateway's HTTP session is FastAPI's TestClient, so every request goes
through the router and handlers over an in-memory store.
"""

from unittest.mock import MagicMock

import pytest

from fintrack.client import (
    ApiGateway,
    ClientController,
    GatewayError,
    NotificationKind,
    SessionStore,
    ViewMode,
)
from fintrack.client.insights import FALLBACK_INSIGHT


FORM = {
    "type": "expense",
    "amount": "25.90",
    "description": "Market",
    "date": "2024-05-02",
    "method": "debit",
    "category": "Food",
    "card": "nubank",
}


@pytest.fixture
def session_store(client_settings):
    return SessionStore(client_settings.session_path)


@pytest.fixture
def states():
    return []


@pytest.fixture
def controller(api, client_settings, session_store, states):
    gateway = ApiGateway(settings=client_settings, session=api)
    return ClientController(
        gateway=gateway,
        session_store=session_store,
        settings=client_settings,
        on_change=states.append,
    )


@pytest.fixture
def logged_in(controller):
    controller.register("ana", "1234")
    controller.login("ana", "1234")
    return controller


class TestSession:
    """Tests for start, login, register and logout."""

    def test_start_without_session(self, controller, states):
        controller.start()
        assert controller.state.view == ViewMode.LOGIN
        assert states, "listener should render the initial state"

    def test_register_then_login(self, controller, session_store):
        assert controller.register("ana", "1234") is True
        assert controller.state.view == ViewMode.LOGIN
        assert controller.state.notification.message == "Account created! Log in now"

        assert controller.login("ana", "1234") is True
        assert controller.state.username == "ana"
        assert controller.state.view == ViewMode.DASHBOARD
        assert session_store.load() == "ana"

    def test_start_restores_session(self, logged_in, api, client_settings, session_store):
        """Test that a remembered user lands on a loaded dashboard."""
        logged_in.submit_form(FORM)

        fresh = ClientController(
            gateway=ApiGateway(settings=client_settings, session=api),
            session_store=session_store,
            settings=client_settings,
        )
        fresh.start()

        assert fresh.state.view == ViewMode.DASHBOARD
        assert [t.description for t in fresh.state.transactions] == ["Market"]

    def test_wrong_password(self, controller, session_store):
        controller.register("ana", "1234")
        assert controller.login("ana", "nope") is False
        assert controller.state.notification.kind == NotificationKind.ERROR
        assert controller.state.notification.message == "Invalid username or password"
        assert session_store.load() is None

    def test_duplicate_registration(self, controller):
        controller.register("ana", "1234")
        assert controller.register("ana", "9999") is False
        assert controller.state.notification.message == "User already exists"

    def test_logout(self, logged_in, session_store):
        logged_in.logout()
        assert logged_in.state.view == ViewMode.LOGIN
        assert logged_in.state.username is None
        assert session_store.load() is None


class TestLocalValidation:
    """Tests for checks that happen before any request."""

    @pytest.fixture
    def gateway(self):
        return MagicMock(spec=ApiGateway)

    @pytest.fixture
    def offline(self, gateway, client_settings, session_store):
        return ClientController(gateway=gateway, session_store=session_store, settings=client_settings)

    @pytest.mark.parametrize("username,password,message", [
        ("", "1234", "Fill in all fields"),
        ("ana", "", "Fill in all fields"),
        ("an", "1234", "Username must be at least 3 characters"),
        ("ana", "123", "Password must be at least 4 characters"),
    ])
    def test_register_validation(self, offline, gateway, username, password, message):
        assert offline.register(username, password) is False
        assert offline.state.notification.message == message
        gateway.register_user.assert_not_called()

    def test_login_requires_both_fields(self, offline, gateway):
        assert offline.login("  ", "1234") is False
        assert offline.state.notification.message == "Fill in all fields"
        gateway.check_user.assert_not_called()

    @pytest.mark.parametrize("amount", ["0", "", "-5", "abc", None])
    def test_form_rejects_non_positive_amount(self, offline, gateway, amount):
        offline._state = offline.state.model_copy(update={"username": "ana"})
        assert offline.submit_form({**FORM, "amount": amount}) is False
        assert offline.state.notification.message == "Enter a valid amount"
        gateway.save_transaction.assert_not_called()

    def test_form_rejects_blank_description(self, offline, gateway):
        offline._state = offline.state.model_copy(update={"username": "ana"})
        assert offline.submit_form({**FORM, "description": "   "}) is False
        assert offline.state.notification.message == "Enter a description"
        gateway.save_transaction.assert_not_called()

    def test_connection_error_becomes_notification(self, offline, gateway):
        gateway.check_user.side_effect = GatewayError("refused")
        assert offline.login("ana", "1234") is False
        assert offline.state.notification.message == "Connection error: refused"
        assert offline.state.loading is False


class TestTransactions:
    """Tests for save, edit, delete and load."""

    def test_save_returns_to_fresh_dashboard(self, logged_in):
        """Test that a save shows the dashboard with the reloaded list."""
        logged_in.open_form()
        assert logged_in.state.view == ViewMode.FORM

        assert logged_in.submit_form(FORM) is True

        state = logged_in.state
        assert state.view == ViewMode.DASHBOARD
        assert state.notification.message == "Transaction saved successfully!"
        assert len(state.transactions) == 1
        saved = state.transactions[0]
        assert saved.id == 2
        assert saved.amount == pytest.approx(25.9)
        assert saved.card.value == "nubank"

    def test_edit_updates_same_row(self, logged_in):
        logged_in.submit_form(FORM)
        logged_in.submit_form({**FORM, "description": "Bus", "date": "2024-05-03"})

        bus = next(t for t in logged_in.state.transactions if t.description == "Bus")
        logged_in.open_form(bus)
        logged_in.submit_form({**FORM, "description": "Taxi", "amount": "40", "date": "2024-05-03"})

        transactions = logged_in.state.transactions
        assert len(transactions) == 2
        taxi = next(t for t in transactions if t.description == "Taxi")
        assert taxi.id == bus.id
        assert taxi.amount == 40

    def test_transactions_sorted_newest_first(self, logged_in):
        for day in ("2024-05-01", "2024-05-09", "2024-05-04"):
            logged_in.submit_form({**FORM, "date": day})
        assert [t.date for t in logged_in.state.transactions] == ["2024-05-09", "2024-05-04", "2024-05-01"]

    def test_delete(self, logged_in):
        logged_in.submit_form(FORM)
        logged_in.submit_form({**FORM, "description": "Bus"})
        market = next(t for t in logged_in.state.transactions if t.description == "Market")

        assert logged_in.delete_transaction(market.id) is True

        assert [t.description for t in logged_in.state.transactions] == ["Bus"]
        assert logged_in.state.transactions[0].id == 2
        assert logged_in.state.notification.message == "Transaction removed!"

    def test_delete_header_reports_error(self, logged_in):
        assert logged_in.delete_transaction(1) is False
        assert logged_in.state.notification.kind == NotificationKind.ERROR
        assert logged_in.state.notification.message == "Error removing: Invalid index"

    def test_only_own_transactions_loaded(self, logged_in):
        logged_in.submit_form(FORM)
        logged_in.logout()
        logged_in.register("bob", "abcd")
        logged_in.login("bob", "abcd")
        assert logged_in.state.transactions == ()

    def test_loading_flag_wraps_requests(self, logged_in, states):
        """Test that loading is raised during a call and cleared after."""
        states.clear()
        logged_in.load_data()
        assert states[0].loading is True
        assert states[-1].loading is False


class TestInsights:
    """Tests for the insight flow."""

    def test_insight_text(self, logged_in, http_session):
        logged_in.submit_form(FORM)
        logged_in.fetch_insights()

        assert logged_in.state.insight == "Spend less 💡"
        sent = http_session.post.call_args.kwargs["json"]["messages"]
        assert "Market - R$25.9 (expense, nubank)" in sent[1]["content"]

    def test_fallback_when_no_choices(self, logged_in, http_session):
        http_session.post.return_value.json.return_value = {"id": "x"}
        logged_in.fetch_insights()
        assert logged_in.state.insight == FALLBACK_INSIGHT

    def test_dismiss(self, logged_in):
        logged_in.fetch_insights()
        logged_in.dismiss_insight()
        assert logged_in.state.insight is None

    def test_insight_shown_once_per_fetch(self, logged_in, http_session):
        """Test that taking the insight clears it, so later reruns do not reopen it."""
        logged_in.fetch_insights()

        assert logged_in.take_insight() == "Spend less 💡"
        assert logged_in.state.insight is None
        assert logged_in.take_insight() is None

        logged_in.fetch_insights()
        assert logged_in.take_insight() == "Spend less 💡"
        assert http_session.post.call_count == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
