"""
Streamlit Frontend for Fintrack

The screen people use every day to log income and expenses.

DESIGN PRINCIPLES:
1. The controller owns all state; this file only draws it
2. Every action reruns the script so the screen matches the state
3. Clear feedback (toast) after every operation
4. Deleting always asks first

Screens: login, register, dashboard, transaction form.
"""

from datetime import date

import streamlit as st

from fintrack.client import ClientController, NotificationKind, ViewMode
from fintrack.client.views import (
    CARD_OPTIONS,
    card_option,
    compute_totals,
    form_amount,
    format_money,
    format_signed,
)
from fintrack.models.transaction import (
    CATEGORY_SUGGESTIONS,
    DEFAULT_CATEGORY,
    PaymentMethod,
    Transaction,
    TransactionType,
)


# Page configuration
st.set_page_config(
    page_title="Fintrack",
    page_icon="💸",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# Custom CSS
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .balance-box {
        padding: 20px;
        background-color: #4F46E5;
        color: white;
        border-radius: 12px;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
    .card-badge {
        display: inline-block;
        padding: 2px 10px;
        border-radius: 8px;
        color: white;
        font-size: 0.8em;
    }
    .income { color: #10B981; font-weight: bold; }
    .expense { color: #DC2626; font-weight: bold; }
</style>
""", unsafe_allow_html=True)


def get_controller() -> ClientController:
    """One controller per browser session, started on first use."""
    if "controller" not in st.session_state:
        controller = ClientController()
        controller.start()
        st.session_state.controller = controller
    return st.session_state.controller


def show_notification(controller: ClientController):
    notification = controller.state.notification
    if notification is None:
        return
    icon = "✅" if notification.kind == NotificationKind.SUCCESS else "⚠️"
    st.toast(notification.message, icon=icon)
    controller.dismiss_notification()


def main():
    """Main application entry point."""
    controller = get_controller()
    show_notification(controller)

    view = controller.state.visible_view
    if view == ViewMode.LOGIN:
        render_login_page(controller)
    elif view == ViewMode.REGISTER:
        render_register_page(controller)
    elif view == ViewMode.FORM:
        render_form_page(controller)
    else:
        render_dashboard_page(controller)


def render_login_page(controller: ClientController):
    st.title("💸 Fintrack")
    st.markdown("Log in to see your transactions.")

    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        with st.spinner("Checking..."):
            controller.login(username, password)
        st.rerun()

    if st.button("Create an account"):
        controller.show_register()
        st.rerun()


def render_register_page(controller: ClientController):
    st.title("📝 Create account")

    with st.form("register_form"):
        username = st.text_input("Username", help="At least 3 characters")
        password = st.text_input("Password", type="password", help="At least 4 characters")
        submitted = st.form_submit_button("Register", type="primary")

    if submitted:
        with st.spinner("Creating account..."):
            controller.register(username, password)
        st.rerun()

    if st.button("Back to login"):
        controller.show_login()
        st.rerun()


def render_dashboard_page(controller: ClientController):
    state = controller.state
    currency = controller.settings.currency_symbol

    st.sidebar.markdown(f"**Logged in as** {state.username}")
    if st.sidebar.button("🚪 Log out"):
        controller.logout()
        st.rerun()

    st.title(f"Hi, {state.username} 👋")

    totals = compute_totals(state.transactions)
    st.markdown(f"""
    <div class="balance-box">
        <div>Balance</div>
        <div class="big-number">{format_money(totals.balance, currency)}</div>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_money(totals.income, currency))
    col2.metric("Expenses", format_money(totals.expense, currency))
    col3.metric("Transactions", len(state.transactions))

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("➕ New", type="primary"):
            controller.open_form()
            st.rerun()
    with col2:
        if st.button("🔄 Refresh"):
            with st.spinner("Loading..."):
                controller.load_data()
            st.rerun()
    with col3:
        if st.button("✨ Insights", disabled=not state.transactions):
            with st.spinner("Thinking..."):
                controller.fetch_insights()
            st.rerun()

    insight = controller.take_insight()
    if insight:
        render_insight_dialog(insight)

    st.markdown("---")

    if not state.transactions:
        st.info("No transactions yet. Use 'New' to add your first one.")
        return

    for transaction in state.transactions:
        render_transaction_row(controller, transaction)


def render_transaction_row(controller: ClientController, transaction: Transaction):
    currency = controller.settings.currency_symbol
    option = card_option(transaction.card)
    css_class = "income" if transaction.type == TransactionType.INCOME else "expense"

    col1, col2, col3, col4 = st.columns([5, 3, 1, 1])
    with col1:
        st.markdown(
            f"**{transaction.description}**  \n"
            f"{transaction.date} · {transaction.category} · {transaction.method.value.title()} "
            f'<span class="card-badge" style="background-color:{option.color}">{option.label}</span>',
            unsafe_allow_html=True,
        )
    with col2:
        st.markdown(
            f'<span class="{css_class}">{format_signed(transaction, currency)}</span>',
            unsafe_allow_html=True,
        )
    with col3:
        if st.button("✏️", key=f"edit_{transaction.id}"):
            controller.open_form(transaction)
            st.rerun()
    with col4:
        if st.button("🗑️", key=f"delete_{transaction.id}"):
            st.session_state.pending_delete = transaction.id
            st.rerun()

    if st.session_state.get("pending_delete") == transaction.id:
        st.warning(f"Delete '{transaction.description}'?")
        yes, no = st.columns(2)
        with yes:
            if st.button("Yes, delete", key=f"confirm_{transaction.id}", type="primary"):
                st.session_state.pending_delete = None
                with st.spinner("Removing..."):
                    controller.delete_transaction(transaction.id)
                st.rerun()
        with no:
            if st.button("Cancel", key=f"cancel_{transaction.id}"):
                st.session_state.pending_delete = None
                st.rerun()


@st.dialog("✨ Insights")
def render_insight_dialog(insight: str):
    st.markdown(insight)
    if st.button("Close"):
        st.rerun()


def render_form_page(controller: ClientController):
    editing = controller.state.editing
    existing = editing or Transaction(category=CATEGORY_SUGGESTIONS[0], card=next(iter(CARD_OPTIONS)))

    st.title("✏️ Edit transaction" if editing else "➕ New transaction")

    with st.form("transaction_form"):
        tx_type = st.radio(
            "Type",
            options=list(TransactionType),
            index=list(TransactionType).index(existing.type),
            format_func=lambda x: x.value.title(),
            horizontal=True,
        )
        amount = st.number_input(
            f"Amount ({controller.settings.currency_symbol}) *",
            value=form_amount(existing),
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        description = st.text_input("Description *", value=existing.description)

        col1, col2 = st.columns(2)
        with col1:
            known_date = existing.sort_date if editing else date.min
            tx_date = st.date_input("Date", value=known_date if known_date != date.min else date.today())
            method = st.selectbox(
                "Method",
                options=list(PaymentMethod),
                index=list(PaymentMethod).index(existing.method),
                format_func=lambda x: x.value.title(),
            )
        with col2:
            # Keep a custom category from the sheet selectable
            categories = list(CATEGORY_SUGGESTIONS)
            if existing.category not in categories:
                categories.insert(0, existing.category or DEFAULT_CATEGORY)
            category = st.selectbox(
                "Category",
                options=categories,
                index=categories.index(existing.category or DEFAULT_CATEGORY),
            )
            card = st.selectbox(
                "Card",
                options=list(CARD_OPTIONS),
                index=list(CARD_OPTIONS).index(existing.card),
                format_func=lambda x: CARD_OPTIONS[x].label,
            )

        submitted = st.form_submit_button("💾 Save", type="primary")

    if submitted:
        with st.spinner("Saving..."):
            controller.submit_form({
                "type": tx_type.value,
                "amount": amount,
                "description": description,
                "date": tx_date.isoformat(),
                "method": method.value,
                "category": category,
                "card": card.value,
            })
        st.rerun()

    if st.button("← Back"):
        controller.back_to_dashboard()
        st.rerun()


if __name__ == "__main__":
    main()
