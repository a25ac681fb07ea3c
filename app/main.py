"""
Streamlit Frontend for the Expense Tracker

DESIGN PRINCIPLES:
1. Every number shown comes from ExpenseTracker.dashboard()
2. Destructive actions (delete, reset) need explicit confirmation
3. Validation problems are shown in plain language next to the form

The UI holds no ledger state of its own. After every mutation it
reruns, and the dashboard is rebuilt from the store.
"""

import datetime as dt

import plotly.graph_objects as go
import streamlit as st

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.export import NothingToExportError
from finance_tracker.formatting import (
    format_currency,
    format_display_date,
    format_month_label,
    format_percentage,
    format_signed_amount,
)
from finance_tracker.models import ALL, DashboardView, FilterCriteria, ProgressLevel, TransactionType
from finance_tracker.orchestrator import ExpenseTracker, create_app_components
from finance_tracker.services.storage import StorageError
from finance_tracker.validation import TransactionValidator, ValidationError


DEFAULT_CATEGORIES = [
    "Food",
    "Transportation",
    "Housing",
    "Utilities",
    "Entertainment",
    "Healthcare",
    "Shopping",
    "Salary",
    "Other",
]

PROGRESS_COLOURS = {
    ProgressLevel.OK: "#28a745",
    ProgressLevel.WARNING: "#ffc107",
    ProgressLevel.DANGER: "#dc3545",
}


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .income { color: #28a745; font-weight: bold; }
    .expense { color: #dc3545; font-weight: bold; }
    .progress-track {
        background-color: #e9ecef;
        border-radius: 6px;
        height: 12px;
        margin: 4px 0 2px 0;
    }
    .progress-fill {
        border-radius: 6px;
        height: 12px;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Get or create the tracker (cached for the server process)."""
    return create_app_components()


def main():
    """Main application entry point."""
    tracker = get_tracker()
    symbol = get_settings().app.currency_symbol

    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "🎯 Budgets", "🕑 Activity", "⚙️ Settings"],
        index=0,
    )

    if tracker.state_was_reset:
        st.sidebar.warning(
            "Saved data could not be read, so the tracker started empty. "
            "The unreadable files are kept until you save something new."
        )

    if page == "📊 Dashboard":
        render_dashboard_page(tracker, symbol)
    elif page == "🎯 Budgets":
        render_budgets_page(tracker, symbol)
    elif page == "🕑 Activity":
        render_activity_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def show_validation_error(error: ValidationError):
    st.error(TransactionValidator().get_user_friendly_summary(error))


def render_dashboard_page(tracker: ExpenseTracker, symbol: str):
    """Summary cards, add form, filters, transaction table and charts."""
    st.title("📊 Dashboard")

    view = tracker.dashboard(build_criteria(tracker))

    render_summary(view, symbol)
    st.markdown("---")

    render_add_form(tracker)
    st.markdown("---")

    render_transactions(tracker, view, symbol)
    st.markdown("---")

    render_charts(view)


def render_summary(view: DashboardView, symbol: str):
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_currency(view.summary.total_income, symbol))
    col2.metric("Total Expenses", format_currency(view.summary.total_expense, symbol))
    col3.metric("Balance", format_currency(view.summary.balance, symbol))

    for alert in view.alerts:
        st.warning(f"⚠️ {alert.message}")


def render_add_form(tracker: ExpenseTracker):
    st.subheader("➕ Add Transaction")

    with st.form("add_transaction", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            title = st.text_input("Title *", placeholder="e.g. Groceries")
            transaction_type = st.selectbox(
                "Type *",
                options=list(TransactionType),
                format_func=lambda t: t.value.title(),
            )
        with col2:
            amount = st.text_input("Amount *", placeholder="0.00")
            category = st.selectbox("Category *", options=DEFAULT_CATEGORIES)
        with col3:
            date = st.date_input("Date *", value=dt.date.today())

        submitted = st.form_submit_button("Add Transaction", type="primary")

    if submitted:
        try:
            tracker.add_transaction(title, amount, transaction_type, category, date)
        except ValidationError as e:
            show_validation_error(e)
            return
        except StorageError as e:
            st.error(f"Could not save the transaction: {e}")
            return
        st.rerun()


def build_criteria(tracker: ExpenseTracker) -> FilterCriteria:
    """Read the filter widgets into FilterCriteria."""
    view = tracker.dashboard()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        month = st.selectbox(
            "Month",
            options=[ALL] + view.month_options,
            format_func=lambda m: "All Months" if m == ALL else format_month_label(m),
        )
    with col2:
        category = st.selectbox(
            "Category",
            options=[ALL] + view.category_options,
            format_func=lambda c: "All Categories" if c == ALL else c,
        )
    with col3:
        transaction_type = st.selectbox(
            "Type",
            options=[ALL, TransactionType.INCOME.value, TransactionType.EXPENSE.value],
            format_func=lambda t: "All Types" if t == ALL else t.title(),
        )
    with col4:
        search_text = st.text_input("Search", placeholder="Search titles...")

    return FilterCriteria.build(
        month=month,
        category=category,
        type=transaction_type,
        search_text=search_text,
    )


def render_transactions(tracker: ExpenseTracker, view: DashboardView, symbol: str):
    st.subheader("📋 Transactions")

    if view.is_empty:
        st.info("No transactions yet. Add your first one above.")
        return
    if not view.transactions:
        st.info("No transactions match the current filters.")
        return

    for transaction in view.transactions:
        col1, col2, col3, col4, col5 = st.columns([2, 3, 2, 2, 1])
        col1.write(format_display_date(transaction.date))
        col2.write(transaction.title)
        col3.write(transaction.category)
        css_class = "income" if transaction.is_income else "expense"
        col4.markdown(
            f'<span class="{css_class}">'
            f"{format_signed_amount(transaction.amount, transaction.type, symbol)}</span>",
            unsafe_allow_html=True,
        )
        with col5.popover("🗑️"):
            st.write("Delete this transaction?")
            if st.button("Delete", key=f"delete_{transaction.id}", type="primary"):
                try:
                    tracker.delete_transaction(transaction.id)
                except StorageError as e:
                    st.error(f"Could not delete: {e}")
                else:
                    st.rerun()


def render_charts(view: DashboardView):
    if view.is_empty:
        return

    col1, col2 = st.columns(2)

    with col1:
        if view.expenses_by_category:
            fig = go.Figure(go.Pie(
                labels=list(view.expenses_by_category),
                values=[float(v) for v in view.expenses_by_category.values()],
                hole=0.4,
            ))
            fig.update_traces(textposition="inside", textinfo="percent+label")
            fig.update_layout(title="Expenses by Category", height=400)
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No expenses recorded yet.")

    with col2:
        months = [format_month_label(m.month, style="short") for m in view.monthly_series]
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=months,
            y=[float(m.income) for m in view.monthly_series],
            name="Income",
            marker_color="#4CAF50",
        ))
        fig.add_trace(go.Bar(
            x=months,
            y=[float(m.expense) for m in view.monthly_series],
            name="Expenses",
            marker_color="#FF5252",
        ))
        fig.update_layout(barmode="group", title="Monthly Income vs Expenses", height=400)
        st.plotly_chart(fig, use_container_width=True)


def render_budgets_page(tracker: ExpenseTracker, symbol: str):
    """Budget form and per-category progress."""
    st.title("🎯 Budgets")

    with st.form("set_budget", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            category = st.selectbox("Category *", options=DEFAULT_CATEGORIES)
        with col2:
            amount = st.text_input("Monthly limit *", placeholder="0.00")
        submitted = st.form_submit_button("Set Budget", type="primary")

    if submitted:
        try:
            tracker.set_budget(category, amount)
        except ValidationError as e:
            show_validation_error(e)
        except StorageError as e:
            st.error(f"Could not save the budget: {e}")
        else:
            st.rerun()

    view = tracker.dashboard()
    st.markdown("---")

    if not view.budgets:
        st.info("No budgets set yet.")
        return

    for alert in view.alerts:
        st.warning(f"⚠️ {alert.message}")

    for evaluation in view.budgets:
        colour = PROGRESS_COLOURS[evaluation.progress_level]
        st.markdown(f"**{evaluation.category}**")
        st.markdown(
            f'<div class="progress-track"><div class="progress-fill" '
            f'style="width: {evaluation.progress_width}%; background-color: {colour};">'
            f"</div></div>",
            unsafe_allow_html=True,
        )
        st.caption(
            f"{format_currency(evaluation.spent, symbol)} / "
            f"{format_currency(evaluation.limit, symbol)} · "
            f"{format_percentage(evaluation.percentage)}"
        )


def render_activity_page(tracker: ExpenseTracker):
    """Recent audit events."""
    st.title("🕑 Recent Activity")

    events = tracker.recent_activity(limit=50)
    if not events:
        st.info("Nothing has happened yet.")
        return

    for event in events:
        st.markdown(
            f"`{event.timestamp.strftime('%Y-%m-%d %H:%M:%S')}` "
            f"**{event.event_type.value.replace('_', ' ').title()}** · {event.description}"
        )


def render_settings_page(tracker: ExpenseTracker):
    """Configuration status, export and reset."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name in ("storage", "budgets", "app"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings - OK")
        else:
            error = status.get(f"{name}_error", "Invalid")
            st.error(f"❌ {name.title()} settings - {error}")

    st.markdown("---")
    st.markdown("### Export")
    try:
        filename, content = tracker.export_csv_content()
    except NothingToExportError:
        st.info("No transactions to export.")
    else:
        st.download_button(
            "⬇️ Download CSV",
            data=content,
            file_name=filename,
            mime="text/csv",
            on_click=tracker.record_export,
            args=(filename, len(tracker.store.transactions)),
        )

    st.markdown("---")
    st.markdown("### Reset")
    st.markdown("Deletes every transaction and budget. This cannot be undone.")
    confirmed = st.checkbox("I understand, delete all my data")
    if st.button("🗑️ Reset All Data", disabled=not confirmed):
        try:
            tracker.reset_all()
        except StorageError as e:
            st.error(f"Could not reset: {e}")
        else:
            st.success("All data has been reset.")
            st.rerun()


if __name__ == "__main__":
    main()
