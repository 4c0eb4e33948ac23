"""
app.py
Streamlit admin dashboard for clients and currencies (backed by the remote REST API).
Run: streamlit run app.py
"""

from __future__ import annotations

from datetime import date

import streamlit as st

import api
import auth
import config
import utils
from controllers import IDLE, ClientsController, CurrenciesController, DashboardController, LoginController
from logging_setup import setup_logging
from models import CLIENT_STATUSES

st.set_page_config(page_title="Admin Dashboard", layout="wide")

PAGES = ["Dashboard", "Clients", "Currencies"]


def init_once():
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)


# ---------- Notifications ----------

def notify(level: str, message: str) -> None:
    # queued so they survive st.rerun()
    st.session_state.setdefault("flash", []).append((level, message))


def show_flash() -> None:
    for level, message in st.session_state.pop("flash", []):
        st.toast(message, icon="✅" if level == "success" else "⚠️")


def controller(name: str, cls):
    if name not in st.session_state:
        st.session_state[name] = cls(api, notify)
    return st.session_state[name]


def reset_views() -> None:
    for name in ("dashboard_ctl", "clients_ctl", "currencies_ctl"):
        st.session_state.pop(name, None)


# ---------- Login ----------

def login_screen():
    st.title("🔐 Admin Login")

    col1, _ = st.columns([1, 1])
    with col1:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", type="primary")

    if submitted:
        if controller("login_ctl", LoginController).submit(email, password):
            reset_views()
            st.session_state.page = "Dashboard"
            st.rerun()
        show_flash()


def logout():
    api.logout()
    reset_views()
    notify("success", "Signed out successfully")


# ---------- Dashboard ----------

def dashboard_page():
    st.header("📊 Dashboard")
    st.caption("Welcome to your admin dashboard")

    ctl: DashboardController = controller("dashboard_ctl", DashboardController)
    if ctl.status == IDLE:
        with st.spinner("Loading analytics..."):
            ctl.load()

    if st.button("Refresh"):
        ctl.load()
        st.rerun()

    analytics = ctl.analytics
    if analytics is None:
        st.caption("No analytics available.")
        return

    ov = analytics.overview
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Clients", ov.total_clients)
    c2.metric("Active Clients", ov.active_clients)
    c3.metric("Inactive Clients", ov.inactive_clients)
    c4.metric("Total Revenue", utils.format_money(ov.total_revenue))

    st.divider()

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Expiring Soon")
        st.caption(f"{ov.expiring_soon_count} clients expiring within {config.EXPIRING_SOON_DAYS} days")
        if analytics.expiring_soon_clients:
            st.dataframe(utils.summaries_to_frame(analytics.expiring_soon_clients), use_container_width=True, hide_index=True)
        else:
            st.caption("No clients expiring soon")
    with col2:
        st.subheader("Recently Expired")
        st.caption("Clients that recently expired")
        if analytics.recently_expired_clients:
            st.dataframe(utils.summaries_to_frame(analytics.recently_expired_clients), use_container_width=True, hide_index=True)
        else:
            st.caption("No recently expired clients")

    st.divider()

    st.subheader("Revenue by Month")
    rev = utils.revenue_by_month_frame(analytics)
    if rev.empty:
        st.caption("No revenue data available")
    else:
        st.bar_chart(rev.set_index("month")["revenue"])
        st.dataframe(rev, use_container_width=True, hide_index=True)

    st.subheader("Top Clients by Revenue")
    top = utils.top_clients_frame(analytics)
    if top.empty:
        st.caption("No client data available")
    else:
        st.dataframe(top, use_container_width=True, hide_index=True)

    st.subheader("Business Type Distribution")
    stats = utils.business_type_frame(analytics)
    if stats.empty:
        st.caption("No business type data available")
    else:
        st.dataframe(stats, use_container_width=True, hide_index=True)


# ---------- Clients ----------

def _date_value(iso: str):
    try:
        return utils.parse_iso(iso[:10]) if iso else None
    except ValueError:
        return None


def client_form(ctl: ClientsController):
    if ctl.editing:
        st.subheader("✏️ Edit Client")
    else:
        st.subheader("➕ Add Client")

    form = ctl.form
    currency_ids = [""] + [c.id for c in ctl.currencies]
    currency_labels = {"": "(none)", **{c.id: f"{c.code} ({c.symbol})" for c in ctl.currencies}}

    with st.form(f"client_form_{ctl.editing_id or 'new'}"):
        col1, col2, col3 = st.columns(3)
        with col1:
            client_name = st.text_input("Client name *", value=form["client_name"])
            email = st.text_input("Email *", value=form["email"])
            phone_number = st.text_input("Phone number *", value=form["phone_number"])
            client_id = st.text_input("Client ID", value=form["client_id"])
            sub_domain_name = st.text_input("Sub-domain", value=form["sub_domain_name"])
        with col2:
            business_name = st.text_input("Business name *", value=form["business_name"])
            business_type = st.text_input("Business type *", value=form["business_type"])
            start_date = st.date_input("Start date *", value=_date_value(form["start_date"]))
            end_date = st.date_input("End date *", value=_date_value(form["end_date"]))
            status = st.selectbox(
                "Status",
                options=list(CLIENT_STATUSES),
                index=CLIENT_STATUSES.index(form["status"]) if form["status"] in CLIENT_STATUSES else 0,
            )
        with col3:
            amount_per_month = st.text_input("Amount per month", value=form["amount_per_month"])
            paid_months = st.text_input("Paid months", value=form["paid_months"])
            currency_id = st.selectbox(
                "Currency",
                options=currency_ids,
                index=currency_ids.index(form["currency_id"]) if form["currency_id"] in currency_ids else 0,
                format_func=lambda cid: currency_labels.get(cid, cid),
            )
            whatsapp_token = st.text_input("WhatsApp token", value=form["whatsapp_token"], type="password")
        notes = st.text_area("Notes", value=form["notes"])

        c1, c2 = st.columns([1, 5])
        submitted = c1.form_submit_button("Update Client" if ctl.editing else "Add Client", type="primary")
        cancelled = c2.form_submit_button("Cancel")

    if cancelled:
        ctl.cancel_form()
        st.rerun()

    if submitted:
        values = {
            "client_id": client_id,
            "client_name": client_name,
            "email": email,
            "phone_number": phone_number,
            "business_name": business_name,
            "business_type": business_type,
            "sub_domain_name": sub_domain_name,
            "start_date": start_date.isoformat() if isinstance(start_date, date) else "",
            "end_date": end_date.isoformat() if isinstance(end_date, date) else "",
            "status": status,
            "notes": notes,
            "amount_per_month": amount_per_month,
            "paid_months": paid_months,
            "currency_id": currency_id,
            "whatsapp_token": whatsapp_token,
        }
        ctl.submit(values)
        st.rerun()


def client_actions(ctl: ClientsController, visible):
    st.subheader("Client actions")
    labels = {c.id: f"{c.client_name} ({c.email})" for c in visible}
    selected_id = st.selectbox("Client", options=["(none)"] + list(labels), format_func=lambda i: labels.get(i, i))
    if selected_id == "(none)":
        return

    client = next(c for c in visible if c.id == selected_id)
    st.write(
        f"Status: **{client.status}** | Enquiry mode: **{'on' if client.enquiry_mode else 'off'}** | "
        f"Ends: **{utils.format_date(client.end_date)}**"
    )

    c1, c2, c3, c4 = st.columns(4)
    if c1.button("Edit"):
        ctl.start_edit(client)
        ctl.load_currencies()
        st.rerun()
    if c2.button("Deactivate" if client.is_active else "Activate"):
        ctl.toggle_status(client)
        st.rerun()
    if c3.button("Disable enquiry mode" if client.enquiry_mode else "Enable enquiry mode"):
        ctl.toggle_enquiry_mode(client)
        st.rerun()
    if c4.button("Delete", type="secondary"):
        ctl.request_delete(client)
        st.rerun()


def delete_confirmation(ctl: ClientsController):
    client = ctl.pending_delete
    st.warning(f"Delete **{client.client_name}**? This cannot be undone.")
    c1, c2 = st.columns([1, 5])
    if c1.button("Confirm delete", type="primary", key="confirm_delete"):
        ctl.confirm_delete()
        st.rerun()
    if c2.button("Cancel", key="cancel_delete"):
        ctl.cancel_delete()
        st.rerun()


def clients_page():
    st.header("👥 Clients")
    st.caption("Manage your client database")

    ctl: ClientsController = controller("clients_ctl", ClientsController)
    if ctl.status == IDLE:
        with st.spinner("Loading clients..."):
            ctl.load()

    top1, top2 = st.columns([3, 1])
    with top1:
        ctl.search = st.text_input("Search clients (this page)", value=ctl.search)
    with top2:
        if st.button("➕ Add Client", type="primary"):
            ctl.start_create()
            ctl.load_currencies()
            st.rerun()

    if ctl.form_open:
        client_form(ctl)
        st.divider()

    visible = ctl.visible_clients()
    if visible:
        st.dataframe(utils.clients_to_frame(visible), use_container_width=True, hide_index=True)
    elif ctl.status == "error":
        st.error("Could not load clients.")
        if st.button("Retry"):
            ctl.load()
            st.rerun()
    else:
        st.caption("No clients found.")

    p1, p2, p3, p4 = st.columns([1, 2, 1, 2])
    if p1.button("← Prev", disabled=not ctl.can_prev()):
        ctl.prev_page()
        st.rerun()
    p2.caption(f"Page {ctl.page} of {max(ctl.total_pages, 1)} ({ctl.total} clients)")
    if p3.button("Next →", disabled=not ctl.can_next()):
        ctl.next_page()
        st.rerun()
    with p4:
        if ctl.clients:
            st.download_button(
                "Download page as CSV",
                data=utils.clients_to_csv_bytes(ctl.clients),
                file_name=f"clients_page_{ctl.page}.csv",
                mime="text/csv",
            )

    st.divider()

    if ctl.pending_delete is not None:
        delete_confirmation(ctl)
    elif visible:
        client_actions(ctl, visible)


# ---------- Currencies ----------

def currency_form(ctl: CurrenciesController):
    st.subheader("✏️ Edit Currency" if ctl.editing else "➕ Add Currency")
    with st.form(f"currency_form_{ctl.editing_id or 'new'}"):
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Name *", value=ctl.form["name"])
        symbol = c2.text_input("Symbol *", value=ctl.form["symbol"])
        code = c3.text_input("Code *", value=ctl.form["code"])
        b1, b2 = st.columns([1, 5])
        submitted = b1.form_submit_button("Update Currency" if ctl.editing else "Add Currency", type="primary")
        cancelled = b2.form_submit_button("Cancel")

    if cancelled:
        ctl.cancel_form()
        st.rerun()
    if submitted:
        ctl.submit({"name": name, "symbol": symbol, "code": code})
        st.rerun()


def currencies_page():
    st.header("💱 Currencies")
    st.caption("Manage your currency database")

    ctl: CurrenciesController = controller("currencies_ctl", CurrenciesController)
    if ctl.status == IDLE:
        with st.spinner("Loading currencies..."):
            ctl.load()

    top1, top2, top3 = st.columns([3, 1, 1])
    with top1:
        ctl.search = st.text_input("Search currencies", value=ctl.search)
    with top2:
        if st.button("➕ Add Currency", type="primary"):
            ctl.start_create()
            st.rerun()
    with top3:
        if st.button("Set up defaults"):
            ctl.setup_defaults()
            st.rerun()

    if ctl.form_open:
        currency_form(ctl)
        st.divider()

    visible = ctl.visible_currencies()
    if not visible:
        st.caption("No currencies found.")
        return

    st.dataframe(utils.currencies_to_frame(visible), use_container_width=True, hide_index=True)

    labels = {c.id: f"{c.name} ({c.code})" for c in visible}
    selected_id = st.selectbox("Currency", options=["(none)"] + list(labels), format_func=lambda i: labels.get(i, i))
    if selected_id != "(none)" and st.button("Edit"):
        ctl.start_edit(next(c for c in visible if c.id == selected_id))
        st.rerun()


# ---------- Layout ----------

def main_app():
    st.sidebar.title("🛠️ Admin Panel")

    if "page" not in st.session_state or st.session_state.page not in PAGES:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(st.session_state.page))

    if st.sidebar.button("Sign Out"):
        logout()
        st.rerun()

    if st.session_state.page == "Dashboard":
        dashboard_page()
    elif st.session_state.page == "Clients":
        clients_page()
    elif st.session_state.page == "Currencies":
        currencies_page()


# --------- App entry ---------

def run():
    init_once()
    show_flash()

    requested = st.session_state.get("page", "Dashboard")
    if auth.resolve_page(requested) == auth.LOGIN_PAGE:
        login_screen()
        return

    main_app()
    show_flash()


if __name__ == "__main__":
    run()
