"""
Streamlit Frontend for Finance Dashboard

A thin rendering layer. Everything it shows comes from the page loaders,
everything it writes goes through the form actions, and every redirect is
a NavigationIntent produced by the session holder or auth service.

DESIGN PRINCIPLES:
1. Pages never talk to the backend client directly
2. Each browser session gets its own components, so auth state, toasts
   and navigation intents never leak between visitors
3. Navigation is data: the current path lives in st.session_state
4. Form outcomes are shown as transient toasts
5. Protected pages are gated before anything is loaded
"""

import asyncio
from collections import deque
from datetime import date
from decimal import Decimal

import streamlit as st
from pydantic import ValidationError

from finance_dashboard.aggregation import (
    calculate_net_worth,
    debt_to_income_ratio,
    describe_payoff_time,
    format_currency,
    format_date,
    format_long_date,
    format_percentage,
    group_accounts_by_type,
    payoff_details,
    sort_debts,
    sort_debts_by,
    suggest_goal,
    summarize_debts,
    summarize_month,
    summarize_net_worth,
)
from finance_dashboard.config import validate_all_settings
from finance_dashboard.models import Debt, DebtStrategy, NavigationIntent, NoticeLevel, TransactionType
from finance_dashboard.orchestrator import AppComponents, create_app_components
from finance_dashboard.queries import ACCOUNT_TYPES, CURRENCIES, DEFAULT_CATEGORIES


# Page configuration
st.set_page_config(
    page_title="Finance Dashboard",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Sidebar label -> path
DASHBOARD_PAGES = {
    "📊 Dashboard": "/dashboard",
    "🏦 Accounts": "/dashboard/accounts",
    "💳 Transactions": "/dashboard/transactions",
    "🎯 Budgets": "/dashboard/budgets",
    "📉 Debts": "/dashboard/debts",
    "🛟 Emergency Fund": "/dashboard/emergency-fund",
    "⚙️ Settings": "/dashboard/settings",
}

TOAST_ICONS = {
    NoticeLevel.SUCCESS: "✅",
    NoticeLevel.INFO: "ℹ️",
    NoticeLevel.WARNING: "⚠️",
    NoticeLevel.ERROR: "❌",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_components() -> AppComponents:
    """
    This browser session's components, created on its first run.

    One set per session: the backend client holds the signed-in user's
    tokens, so none of this may live in st.cache_resource. Settings are
    the only process-wide piece (get_settings is lru_cached).
    """
    if "components" not in st.session_state:
        st.session_state.components = create_app_components()
    return st.session_state.components


def get_intent_queue() -> deque:
    """Intents pushed by auth-state changes, applied on the next run."""
    if "intents" not in st.session_state:
        queue: deque = deque(maxlen=10)
        get_components().session.add_intent_listener(queue.append)
        st.session_state.intents = queue
    return st.session_state.intents


def navigate(intent: NavigationIntent):
    """Act on a NavigationIntent: move to its path and re-render."""
    st.session_state.path = intent.path
    st.session_state.path_query = dict(intent.query)
    st.rerun()


def show_notices(components: AppComponents):
    for notice in components.notifications.drain():
        st.toast(notice.message, icon=TOAST_ICONS.get(notice.level))


def money(amount, currency: str) -> str:
    return format_currency(amount, currency)


def main():
    """Main application entry point."""
    try:
        components = get_components()
    except ValidationError as e:
        st.error(f"Failed to initialize: {e}")
        st.info("Create a `.env` file with SUPABASE_URL and SUPABASE_ANON_KEY. See `.env.example`.")
        st.stop()
    intents = get_intent_queue()
    session = components.session
    app_settings = components.settings.app

    if "path" not in st.session_state:
        st.session_state.path = "/"
        st.session_state.path_query = {}

    # Auth links land with ?code=...
    if "code" in st.query_params:
        st.session_state.path = app_settings.auth_callback_path

    if not session.is_mounted:
        run_async(session.mount())

    session.current_path = st.session_state.path

    while intents:
        navigate(intents.popleft())

    path = st.session_state.path

    if session.is_authenticated and session.is_public_path(path):
        navigate(NavigationIntent(path=app_settings.dashboard_path, reason="authenticated"))

    if path == app_settings.auth_callback_path:
        render_auth_callback(components)
    elif path.startswith(app_settings.sign_up_path):
        render_sign_up_page(components)
    elif path == "/forgot-password":
        render_forgot_password_page(components)
    elif path.startswith(app_settings.dashboard_path):
        intent = session.guard(path)
        if intent is not None:
            navigate(intent)
        render_dashboard_shell(components, path)
    else:
        render_sign_in_page(components)

    show_notices(components)


# =============================================================================
# AUTH PAGES
# =============================================================================

def render_sign_in_page(components: AppComponents):
    st.title("💰 Finance Dashboard")
    st.markdown("### Sign in")

    query = st.session_state.get("path_query", {})
    if query.get("error"):
        st.error(query["error"])

    with st.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        if not email or not password:
            st.error("Email and password are required.")
            return
        result = run_async(components.auth.sign_in(email, password))
        if result.success:
            run_async(components.session.refresh_session())
            # The returnUrl wins over the provider's own redirect
            get_intent_queue().clear()
            return_url = query.get("returnUrl")
            if return_url and components.session.is_protected_path(return_url):
                navigate(NavigationIntent(path=return_url, reason="signed_in"))
            navigate(result.intent)
        st.error(result.error or "Failed to sign in")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Create an account"):
            navigate(NavigationIntent(path=components.settings.app.sign_up_path))
    with col2:
        if st.button("Forgot password?"):
            navigate(NavigationIntent(path="/forgot-password"))


def render_sign_up_page(components: AppComponents):
    st.title("Create your account")

    with st.form("sign_up"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Sign up")

    if submitted:
        if len(password) < 6:
            st.error("Password must be at least 6 characters.")
        elif password != confirm:
            st.error("Passwords do not match.")
        else:
            result = run_async(components.auth.sign_up(email, password))
            if result.success:
                st.success("Check your email for a confirmation link.")
            else:
                st.error(result.error or "Failed to sign up")

    if st.button("Back to sign in"):
        navigate(NavigationIntent(path=components.settings.app.sign_in_path))


def render_forgot_password_page(components: AppComponents):
    st.title("Reset your password")

    with st.form("forgot_password"):
        email = st.text_input("Email")
        submitted = st.form_submit_button("Send reset link")

    if submitted and email:
        result = run_async(components.auth.reset_password(email))
        if result.success:
            st.success("If that address has an account, a reset link is on its way.")
        else:
            st.error(result.error or "Failed to send reset email")

    if st.button("Back to sign in"):
        navigate(NavigationIntent(path=components.settings.app.sign_in_path))


def render_auth_callback(components: AppComponents):
    st.info("Verifying your authentication...")
    code = st.query_params.get("code")
    result = run_async(components.auth.complete_auth_callback(code))
    st.query_params.clear()
    if result.success:
        run_async(components.session.refresh_session())
    navigate(result.intent)


# =============================================================================
# DASHBOARD SHELL
# =============================================================================

def section_for(path: str) -> str:
    """The sidebar entry a path belongs to: /dashboard/debts/view -> /dashboard/debts."""
    matches = [p for p in DASHBOARD_PAGES.values() if path == p or path.startswith(p + "/")]
    return max(matches, key=len, default="/dashboard")


def record_id() -> str:
    return st.session_state.get("path_query", {}).get("id", "")


def render_dashboard_shell(components: AppComponents, path: str):
    user = components.session.user
    profile = run_async(components.loaders.load_profile(user.id))
    currency = (profile.currency if profile and profile.currency
                else components.settings.app.default_currency)

    st.sidebar.title("💰 Finance Dashboard")
    st.sidebar.caption(user.email or user.id)
    st.sidebar.markdown("---")

    labels = list(DASHBOARD_PAGES)
    section = section_for(path)
    current = next(l for l, p in DASHBOARD_PAGES.items() if p == section)
    page = st.sidebar.radio("Navigate to:", labels, index=labels.index(current))
    if DASHBOARD_PAGES[page] != section:
        navigate(NavigationIntent(path=DASHBOARD_PAGES[page]))

    st.sidebar.markdown("---")
    if st.sidebar.button("Sign out"):
        navigate(run_async(components.session.sign_out()))

    # Route to appropriate page
    if path == "/dashboard/accounts":
        render_accounts_page(components, user.id, currency)
    elif path == "/dashboard/accounts/edit":
        render_account_edit_page(components, user.id, record_id())
    elif path == "/dashboard/transactions":
        render_transactions_page(components, user.id, currency)
    elif path == "/dashboard/budgets":
        render_budgets_page(components, user.id, currency)
    elif path == "/dashboard/budgets/edit":
        render_budget_edit_page(components, user.id, record_id())
    elif path == "/dashboard/debts":
        render_debts_page(components, user.id, currency)
    elif path == "/dashboard/debts/view":
        render_debt_detail_page(components, user.id, record_id(), currency)
    elif path == "/dashboard/debts/edit":
        render_debt_edit_page(components, user.id, record_id())
    elif path == "/dashboard/emergency-fund":
        render_emergency_fund_page(components, user.id, currency)
    elif path == "/dashboard/settings":
        render_settings_page(components, user.id, profile)
    else:
        render_overview_page(components, user.id, currency)


def render_overview_page(components: AppComponents, user_id: str, currency: str):
    st.title("📊 Dashboard")
    data = run_async(components.loaders.load_dashboard(user_id))

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Net Worth", money(data.net_worth.net_worth, currency))
    col2.metric("Income (this month)", money(data.month.income, currency))
    col3.metric("Expenses (this month)", money(data.month.expenses, currency))
    col4.metric("Savings Rate", format_percentage(data.month.savings_rate))

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Income vs Expenses")
        st.bar_chart(
            {
                "Month": [p.label for p in data.trend],
                "Income": [float(p.income) for p in data.trend],
                "Expenses": [float(p.expenses) for p in data.trend],
            },
            x="Month",
        )
    with col2:
        st.markdown("### Spending by Category")
        if data.categories:
            st.bar_chart(
                {
                    "Category": [c.category for c in data.categories],
                    "Amount": [float(c.amount) for c in data.categories],
                },
                x="Category",
            )
        else:
            st.info("No expenses recorded this month.")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Budget Progress")
        for progress in data.budgets.budgets:
            st.progress(
                min(progress.percentage, 100) / 100,
                text=f"{progress.budget.category}: "
                     f"{money(progress.spent_amount, currency)} of "
                     f"{money(progress.budget.budget_amount, currency)} ({progress.percentage}%)",
            )
        if not data.budgets.budgets:
            st.info("No budgets yet.")
    with col2:
        st.markdown("### Debt Overview")
        summary = data.debt_summary
        st.metric("Total Debt", money(summary.total_debt, currency))
        if summary.estimated_payoff_date:
            st.caption(
                f"Est. payoff {summary.estimated_payoff_date:%b %Y} "
                f"({summary.months_to_payoff} months)"
            )
        if data.emergency_fund:
            fund = data.emergency_fund
            st.markdown("### Emergency Fund")
            st.progress(fund.progress_percentage / 100, text=f"{fund.progress_percentage}% of goal")

    st.markdown("### Recent Transactions")
    for t in data.recent:
        st.write(f"{format_date(t.date)} · {t.description or t.category} · {money(t.total, currency)}")
    if not data.recent:
        st.info("No transactions yet.")


# =============================================================================
# RECORD PAGES
# =============================================================================

def render_accounts_page(components: AppComponents, user_id: str, currency: str):
    st.title("🏦 Accounts")
    accounts = run_async(components.loaders.load_accounts(user_id))

    summary = summarize_net_worth(accounts)
    col1, col2, col3 = st.columns(3)
    col1.metric("Assets", money(summary.total_assets, currency))
    col2.metric("Liabilities", money(summary.total_liabilities, currency))
    col3.metric("Net Worth", money(calculate_net_worth(accounts), currency))

    for account_type, group in group_accounts_by_type(accounts).items():
        st.markdown(f"### {ACCOUNT_TYPES.get(account_type, account_type.title())}")
        for account in group:
            col1, col2, col3 = st.columns([4, 3, 1])
            col1.write(account.name)
            col2.write(money(account.value, account.currency))
            if col3.button("Edit", key=f"edit_account_{account.id}"):
                navigate(NavigationIntent(path="/dashboard/accounts/edit", query={"id": account.id}))

    st.markdown("---")
    st.markdown("### Add Account")
    with st.form("add_account", clear_on_submit=True):
        values = _account_fields(None)
        if st.form_submit_button("Add account"):
            run_async(components.forms.add_account(user_id, values))
            st.rerun()


def render_account_edit_page(components: AppComponents, user_id: str, account_id: str):
    st.title("Edit Account")
    back = NavigationIntent(path="/dashboard/accounts")
    account = run_async(components.loaders.load_account(user_id, account_id))
    if account is None:
        st.error("Account not found.")
        if st.button("Back to accounts"):
            navigate(back)
        return

    with st.form("edit_account"):
        values = _account_fields(account)
        col1, col2 = st.columns(2)
        save = col1.form_submit_button("Save")
        cancel = col2.form_submit_button("Cancel")
    if save:
        notice = run_async(components.forms.update_account(user_id, account.id, values))
        if not notice.is_error:
            navigate(back)
    if cancel:
        navigate(back)


def _account_fields(account) -> dict:
    types = list(ACCOUNT_TYPES)
    currencies = list(CURRENCIES)
    return {
        "name": st.text_input("Name", value=account.name if account else ""),
        "type": st.selectbox(
            "Type",
            types,
            index=types.index(account.type) if account and account.type in types else 0,
            format_func=ACCOUNT_TYPES.get,
        ),
        "value": st.number_input(
            "Balance", value=float(account.value) if account else 0.0, step=0.01
        ),
        "currency": st.selectbox(
            "Currency",
            currencies,
            index=currencies.index(account.currency) if account and account.currency in currencies else 0,
            format_func=lambda c: CURRENCIES[c],
        ),
        "notes": st.text_area("Notes", value=account.notes or "" if account else "") or None,
    }


def render_transactions_page(components: AppComponents, user_id: str, currency: str):
    st.title("💳 Transactions")
    transactions = run_async(components.loaders.load_transactions(user_id))
    accounts = run_async(components.loaders.load_accounts(user_id))
    categories = run_async(components.loaders.load_categories(user_id))

    with st.expander("➕ Add Transaction", expanded=not transactions):
        if not accounts:
            st.warning("Add an account first.")
        else:
            with st.form("add_transaction", clear_on_submit=True):
                kind = st.radio("Type", [t.value for t in TransactionType], horizontal=True,
                                format_func=str.title)
                amount = st.number_input("Amount", min_value=0.01, step=0.01)
                tx_date = st.date_input("Date", value=date.today())
                category = st.selectbox(
                    "Category",
                    sorted(set(categories) | set(DEFAULT_CATEGORIES), key=str.casefold),
                    accept_new_options=True,
                )
                description = st.text_input("Description")
                account_names = {a.id: a.name for a in accounts}
                account_id = st.selectbox("Account", list(account_names), format_func=account_names.get)
                if st.form_submit_button("Add transaction"):
                    run_async(components.forms.add_transaction(user_id, {
                        "type": kind,
                        "total": Decimal(str(amount)),
                        "date": tx_date,
                        "category": category,
                        "description": description,
                        "account_id": account_id,
                    }))
                    st.rerun()

    search = st.text_input("Search", placeholder="Description or category")
    for t in transactions:
        if search and search.lower() not in f"{t.description} {t.category}".lower():
            continue
        col1, col2, col3, col4 = st.columns([2, 4, 3, 2])
        col1.write(format_date(t.date))
        col2.write(t.description or "—")
        col3.write(f"{t.category or 'Uncategorized'} · {t.account_name}")
        col4.write(money(t.total, currency))


def render_budgets_page(components: AppComponents, user_id: str, currency: str):
    st.title("🎯 Budgets")
    overview = run_async(components.loaders.load_budgets(user_id))
    categories = run_async(components.loaders.load_categories(user_id))

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Budgeted", money(overview.total_budget, currency))
    col2.metric("Spent", money(overview.total_spent, currency))
    col3.metric("Remaining", money(overview.remaining, currency))

    for progress in overview.budgets:
        budget = progress.budget
        col1, col2 = st.columns([6, 1])
        col1.progress(
            min(progress.percentage, 100) / 100,
            text=f"{budget.category}: {money(progress.spent_amount, currency)} of "
                 f"{money(budget.budget_amount, currency)} ({progress.percentage}%, {progress.status})",
        )
        if col2.button("Edit", key=f"edit_budget_{budget.id}"):
            navigate(NavigationIntent(path="/dashboard/budgets/edit", query={"id": budget.id}))

    st.markdown("---")
    st.markdown("### Add Budget")
    with st.form("add_budget", clear_on_submit=True):
        values = _budget_fields(None, categories)
        if st.form_submit_button("Add budget"):
            run_async(components.forms.add_budget(user_id, values))
            st.rerun()


def _budget_fields(budget, categories: list[str]) -> dict:
    options = sorted(set(categories) | set(DEFAULT_CATEGORIES), key=str.casefold)
    if budget and budget.category not in options:
        options.insert(0, budget.category)
    return {
        "category": st.selectbox(
            "Category",
            options,
            index=options.index(budget.category) if budget else 0,
            accept_new_options=True,
        ),
        "budget_amount": Decimal(str(st.number_input(
            "Amount",
            min_value=0.0,
            value=float(budget.budget_amount) if budget else 0.0,
            step=1.0,
        ))),
        "start_date": st.date_input(
            "Start date",
            value=budget.start_date if budget else date.today().replace(day=1),
        ),
        "end_date": st.date_input("End date", value=budget.end_date if budget else None),
    }


def render_budget_edit_page(components: AppComponents, user_id: str, budget_id: str):
    st.title("Edit Budget")
    back = NavigationIntent(path="/dashboard/budgets")
    budget = run_async(components.loaders.load_budget(user_id, budget_id))
    if budget is None:
        st.error("Budget not found.")
        if st.button("Back to budgets"):
            navigate(back)
        return

    categories = run_async(components.loaders.load_categories(user_id))
    with st.form("edit_budget"):
        values = _budget_fields(budget, categories)
        col1, col2, col3 = st.columns(3)
        save = col1.form_submit_button("Save")
        delete = col2.form_submit_button("Delete")
        cancel = col3.form_submit_button("Cancel")
    if save:
        notice = run_async(components.forms.update_budget(user_id, budget.id, values))
        if not notice.is_error:
            navigate(back)
    if delete:
        run_async(components.forms.delete_budget(user_id, budget.id))
        navigate(back)
    if cancel:
        navigate(back)


def render_debts_page(components: AppComponents, user_id: str, currency: str):
    st.title("📉 Debts")
    debts = run_async(components.loaders.load_debts(user_id))
    month = summarize_month(run_async(components.loaders.load_transactions(user_id)))
    summary = summarize_debts(debts)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Debt", money(summary.total_debt, currency))
    col2.metric("Monthly Payments", money(summary.total_min_payment, currency))
    col3.metric("Yearly Interest", money(summary.yearly_interest, currency))
    col4.metric(
        "Debt-to-Income",
        format_percentage(debt_to_income_ratio(debts, month.income)),
    )
    if summary.estimated_payoff_date:
        st.caption(f"Est. payoff date: {summary.estimated_payoff_date:%b %Y}")

    col1, col2 = st.columns(2)
    strategy = col1.radio("Strategy", [s.value for s in DebtStrategy], horizontal=True)
    sort_key = col2.selectbox("Sort by", ["strategy", "interest", "balance", "name", "due_date"])
    ordered = sort_debts(debts, strategy) if sort_key == "strategy" else sort_debts_by(debts, sort_key)

    for debt in ordered:
        col1, col2, col3, col4, col5 = st.columns([4, 2, 2, 1, 1])
        col1.write(f"**{debt.name}** · {debt.interest_rate}%")
        col2.write(money(debt.amount, currency))
        col3.write(describe_payoff_time(debt))
        if col4.button("View", key=f"view_debt_{debt.id}"):
            navigate(NavigationIntent(path="/dashboard/debts/view", query={"id": debt.id}))
        if col5.button("Edit", key=f"edit_debt_{debt.id}"):
            navigate(NavigationIntent(path="/dashboard/debts/edit", query={"id": debt.id}))

    st.markdown("---")
    st.markdown("### Add Debt")
    # Outside a form so the payoff estimate follows the inputs
    values = _debt_fields(None, key="new_debt")
    preview = Debt(
        name=values["name"] or "New debt",
        amount=values["amount"],
        interest_rate=values["interest_rate"],
        min_payment=values["min_payment"],
    )
    st.info(f"Payoff estimate: {describe_payoff_time(preview)}")
    if st.button("Add debt"):
        run_async(components.forms.add_debt(user_id, values))
        st.rerun()


def _debt_fields(debt, key: str) -> dict:
    strategies = [s.value for s in DebtStrategy]
    return {
        "name": st.text_input("Name", value=debt.name if debt else "", key=f"{key}_name"),
        "amount": Decimal(str(st.number_input(
            "Balance", min_value=0.0, step=1.0,
            value=float(debt.amount) if debt else 0.0, key=f"{key}_amount",
        ))),
        "interest_rate": Decimal(str(st.number_input(
            "Interest rate (%)", min_value=0.0, step=0.1,
            value=float(debt.interest_rate) if debt else 0.0, key=f"{key}_rate",
        ))),
        "min_payment": Decimal(str(st.number_input(
            "Minimum payment", min_value=0.0, step=1.0,
            value=float(debt.min_payment) if debt else 0.0, key=f"{key}_payment",
        ))),
        "due_date": st.date_input("Due date", value=debt.due_date if debt else None, key=f"{key}_due"),
        "strategy": st.selectbox(
            "Strategy",
            strategies,
            index=strategies.index(debt.strategy.value) if debt else 0,
            key=f"{key}_strategy",
        ),
        "notes": st.text_area("Notes", value=debt.notes or "" if debt else "", key=f"{key}_notes") or None,
    }


def render_debt_detail_page(components: AppComponents, user_id: str, debt_id: str, currency: str):
    st.title("Debt Details")
    back = NavigationIntent(path="/dashboard/debts")
    debt = run_async(components.loaders.load_debt(user_id, debt_id))
    if debt is None:
        st.error("Debt not found.")
        if st.button("Back to debts"):
            navigate(back)
        return

    st.markdown(f"## {debt.name}")
    col1, col2, col3 = st.columns(3)
    col1.metric("Balance", money(debt.amount, currency))
    col2.metric("Interest Rate", f"{debt.interest_rate}%")
    col3.metric("Minimum Payment", money(debt.min_payment, currency))
    if debt.due_date:
        st.write(f"Due: {format_long_date(debt.due_date)}")

    st.markdown("### Payoff Details")
    details = payoff_details(debt)
    if details.capped:
        st.warning("The minimum payment does not cover the interest.")
    else:
        col1, col2, col3 = st.columns(3)
        col1.metric("Time to Payoff", describe_payoff_time(debt))
        col2.metric("Est. Payoff Date", format_long_date(details.payoff_date))
        col3.metric("Total Interest to Pay", money(details.total_interest, currency))

    st.markdown("### Repayment Strategy")
    if debt.strategy == DebtStrategy.AVALANCHE:
        st.write("Paying off debts with the highest interest rates first to minimize interest payments.")
    else:
        st.write("Paying off the smallest balances first to build momentum.")
    if debt.notes:
        st.markdown("### Notes")
        st.write(debt.notes)

    col1, col2, col3 = st.columns(3)
    if col1.button("Edit"):
        navigate(NavigationIntent(path="/dashboard/debts/edit", query={"id": debt.id}))
    if col2.button("Delete"):
        run_async(components.forms.delete_debt(user_id, debt.id))
        navigate(back)
    if col3.button("Back to debts"):
        navigate(back)


def render_debt_edit_page(components: AppComponents, user_id: str, debt_id: str):
    st.title("Edit Debt")
    back = NavigationIntent(path="/dashboard/debts")
    debt = run_async(components.loaders.load_debt(user_id, debt_id))
    if debt is None:
        st.error("Debt not found.")
        if st.button("Back to debts"):
            navigate(back)
        return

    with st.form("edit_debt"):
        values = _debt_fields(debt, key=f"debt_{debt.id}")
        col1, col2 = st.columns(2)
        save = col1.form_submit_button("Save")
        cancel = col2.form_submit_button("Cancel")
    if save:
        notice = run_async(components.forms.update_debt(user_id, debt.id, values))
        if not notice.is_error:
            navigate(NavigationIntent(path="/dashboard/debts/view", query={"id": debt.id}))
    if cancel:
        navigate(back)


def render_emergency_fund_page(components: AppComponents, user_id: str, currency: str):
    st.title("🛟 Emergency Fund")
    data = run_async(components.loaders.load_emergency_fund(user_id))

    if data.status:
        status = data.status
        st.progress(status.progress_percentage / 100, text=f"{status.progress_percentage}%")
        col1, col2, col3 = st.columns(3)
        col1.metric("Saved", money(status.fund.current_amount, currency))
        col2.metric("Goal", money(status.fund.goal_amount, currency))
        col3.metric("Months Covered", f"{status.months_covered}")
        if status.goal_reached:
            st.success("You've reached your emergency fund goal!")
        else:
            gap = status.fund.target_months - status.months_covered
            st.info(f"{gap:.1f} more months to reach your {status.fund.target_months}-month goal")
    else:
        st.info("You haven't set up an emergency fund yet.")

    st.caption(f"Average monthly expenses: {money(data.monthly_expenses, currency)}")

    st.markdown("### Update Fund")
    fund = data.fund
    target = st.slider("Target months", 1, 24, fund.target_months if fund else 6)
    suggested = suggest_goal(data.monthly_expenses, target)
    with st.form("emergency_fund"):
        goal = st.number_input(
            "Goal amount",
            min_value=0.0,
            value=float(fund.goal_amount if fund else suggested),
            help=f"Suggested: {money(suggested, currency)}",
        )
        current = st.number_input(
            "Current amount", min_value=0.0, value=float(fund.current_amount if fund else 0)
        )
        notes = st.text_area("Notes", value=fund.notes or "" if fund else "")
        if st.form_submit_button("Save"):
            run_async(components.forms.save_emergency_fund(user_id, {
                "goal_amount": Decimal(str(goal)),
                "current_amount": Decimal(str(current)),
                "target_months": target,
                "notes": notes or None,
            }))
            st.rerun()


def render_settings_page(components: AppComponents, user_id: str, profile):
    """Render the settings page."""
    st.title("⚙️ Settings")

    currencies = list(CURRENCIES)
    with st.form("profile"):
        full_name = st.text_input("Full name", value=profile.full_name or "" if profile else "")
        current = profile.currency if profile and profile.currency in currencies else "USD"
        currency = st.selectbox("Currency", currencies, index=currencies.index(current))
        prefs = profile.preferences if profile else None
        dark_mode = st.toggle("Dark mode", value=prefs.dark_mode if prefs else False)
        notifications = st.toggle("Notifications", value=prefs.notifications if prefs else True)
        if st.form_submit_button("Save"):
            run_async(components.forms.save_profile(user_id, {
                "full_name": full_name or None,
                "currency": currency,
                "preferences": {"darkMode": dark_mode, "notifications": notifications},
            }))
            st.rerun()

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()
    for name, key in (("Supabase", "supabase"), ("Application", "app")):
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown(
        "To configure the application, create a `.env` file with your Supabase "
        "URL and anon key. See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
