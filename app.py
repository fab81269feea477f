"""
app.py
Streamlit membership tracker (one owner per login).
Run: streamlit run app.py
"""

from __future__ import annotations

import logging
from datetime import date

import streamlit as st

import auth
import config
import members as member_ops
import utils
from models import DURATION_OPTIONS, VIEWS, Member
from store import SqliteMemberStore, SqliteUserStore

st.set_page_config(page_title="Gym Membership Tracker", layout="wide")

log = logging.getLogger(__name__)


@st.cache_resource
def get_stores():
    logging.basicConfig(format=config.LOG_FORMAT, level=config.LOG_LEVEL)
    return SqliteMemberStore(), SqliteUserStore()


def require_login():
    if "session" not in st.session_state:
        st.session_state.session = None


def logout():
    st.session_state.session = None
    st.success("Logged out.")


def login_screen(users):
    st.title("🔐 Gym Owner Login")

    col1, col2 = st.columns([1, 1])
    with col1:
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        c1, c2 = st.columns(2)
        action = None
        if c1.button("Login", type="primary"):
            action = auth.login
        if c2.button("Register"):
            action = auth.register
        if action:
            try:
                st.session_state.session = action(users, email.strip(), password)
                st.rerun()
            except auth.AuthError as e:
                st.error(str(e))

    with col2:
        st.info("New here? Enter an email and password and press **Register**.")


# ---------- Load / save helpers ----------

def load_members(store, session: auth.Session) -> list[Member]:
    return store.load(session.email)


def save_members(store, session: auth.Session, rows: list[Member]) -> None:
    store.save(session.email, rows)


def dashboard_page(store, session: auth.Session):
    st.header("📊 Dashboard")

    rows = load_members(store, session)
    today = date.today()

    c1, c2, c3 = st.columns(3)
    c1.metric("Active members", len(utils.filter_members(rows, "active", today)))
    c2.metric("Ending in next 7 days", len(utils.filter_members(rows, "ending-soon", today)))
    c3.metric("Expired", len(utils.filter_members(rows, "expired", today)))

    st.divider()

    st.subheader("Ending soon")
    soon = member_ops.sort_by_end_date(utils.filter_members(rows, "ending-soon", today))
    if soon:
        st.dataframe(utils.members_to_frame(soon, today), use_container_width=True, hide_index=True)
    else:
        st.caption("No members ending in the next 7 days.")


def member_form(store, session: auth.Session, rows: list[Member], existing: Member | None = None):
    if existing:
        st.subheader(f"✏️ Edit Member ({existing.name})")
    else:
        st.subheader("➕ Add Member")

    choices = utils.duration_options(existing.duration if existing else None)
    labels = list(choices.keys())
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Name", value=(existing.name if existing else ""))
        phone = st.text_input("Phone (10 digits, optional)", value=(existing.phone_number or "") if existing else "")
        price = st.number_input("Price", min_value=0.0, step=100.0, value=(existing.price if existing else 0.0))
    with col2:
        start_date = st.date_input(
            "Start date", value=(utils.parse_iso(existing.start_date) if existing else date.today())
        ).isoformat()
        default_label = next((k for k, v in choices.items() if existing and v == existing.duration), "1 month")
        plan = st.selectbox("Duration", options=labels, index=labels.index(default_label))
        duration = choices[plan]
        st.info(f"End date: **{utils.calc_end_date(start_date, duration)}**")

    errors = member_ops.validate_member_inputs(name, phone.strip() or None, price, start_date, duration)
    for e in errors:
        st.error(e)

    if st.button("Save", type="primary", disabled=bool(errors)):
        if existing:
            rows = member_ops.update_member(
                rows, existing.id, name=name, phone_number=phone, start_date=start_date,
                duration=duration, price=price,
            )
            st.success("Member updated.")
        else:
            rows = member_ops.add_member(rows, member_ops.create_member(name, start_date, duration, price, phone))
            st.success("Member added.")
        save_members(store, session, rows)
        st.rerun()


def members_page(store, session: auth.Session):
    st.header("👥 Members")

    with st.sidebar:
        st.subheader("Search & Filters")
        search = st.text_input("Search (name/phone)")
        view = st.selectbox("Status", list(VIEWS))

    rows = load_members(store, session)
    shown = member_ops.sort_by_end_date(member_ops.search_members(utils.filter_members(rows, view), search))
    st.dataframe(utils.members_to_frame(shown), use_container_width=True, hide_index=True)

    st.divider()

    options = {member_ops.member_label(m): m.id for m in shown}
    selected = st.selectbox("Select member", options=["(none)"] + list(options.keys()))
    if selected != "(none)":
        member_id = options[selected]
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Edit"):
                st.session_state.edit_member_id = member_id
                st.rerun()
        with c2:
            delete_confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
            if st.button("Delete", type="secondary", disabled=not delete_confirm):
                save_members(store, session, member_ops.delete_member(rows, member_id))
                st.success("Member deleted.")
                st.rerun()

    st.divider()

    edit_id = st.session_state.get("edit_member_id")
    if edit_id and any(m.id == edit_id for m in rows):
        member_form(store, session, rows, existing=member_ops.get_member(rows, edit_id))
        if st.button("Cancel edit"):
            st.session_state.edit_member_id = None
            st.rerun()
    else:
        member_form(store, session, rows)


def renewals_page(store, session: auth.Session):
    st.header("🔁 Renewals")

    rows = load_members(store, session)
    if not rows:
        st.info("No members yet.")
        return

    options = {member_ops.member_label(m): m.id for m in rows}
    member_id = options[st.selectbox("Member", list(options.keys()))]
    m = member_ops.get_member(rows, member_id)

    st.write(
        f"Current period: **{m.start_date} → {m.end_date}** | Price: **{m.price:.2f}** "
        f"| Status: **{utils.classify(m)}**"
    )

    labels = list(DURATION_OPTIONS.keys())
    col1, col2, col3 = st.columns(3)
    with col1:
        start_date = st.date_input("Start date", value=date.today()).isoformat()
    with col2:
        duration = DURATION_OPTIONS[st.selectbox("New duration", options=labels, index=labels.index("1 month"))]
    with col3:
        price = st.number_input("Price", min_value=0.0, step=100.0, value=m.price)

    remaining = utils.remaining_days_on_renewal(m, start_date)
    if remaining > 0:
        st.info(f"Current membership has {remaining} days remaining. These days will be added to the renewal.")
    st.caption(f"New end date: **{utils.calc_end_date(start_date, duration + remaining)}**")

    if st.button("Renew", type="primary"):
        save_members(store, session, member_ops.renew(rows, member_id, start_date, duration, price))
        st.success("Renewal completed.")
        st.rerun()

    with st.expander("Renewal history"):
        if m.renewal_history:
            for r in m.renewal_history:
                st.write(f"Renewed on {r.date}: {r.duration} days for {r.price:.2f} ({r.start_date} to {r.end_date})")
        else:
            st.caption("No renewals yet.")


def reports_page(store, session: auth.Session):
    st.header("🧾 Reports")

    rows = load_members(store, session)

    st.subheader("Export members to CSV")
    if rows:
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(rows),
            file_name="members.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")

    st.divider()

    st.subheader("Renewal revenue by month")
    st.dataframe(utils.renewal_revenue_by_month(rows), use_container_width=True, hide_index=True)


def settings_page(store, session: auth.Session):
    st.header("⚙️ Settings")

    st.subheader("Sample data")
    st.caption("Add 3 sample members for testing (adds new members each run).")
    if st.button("Insert sample data"):
        save_members(store, session, load_members(store, session) + utils.sample_members())
        log.info("Inserted sample members for %s", session.email)
        st.success("Sample data inserted.")
        st.rerun()


PAGES = {
    "Dashboard": dashboard_page,
    "Members": members_page,
    "Renewals": renewals_page,
    "Reports": reports_page,
    "Settings": settings_page,
}


def main_app(store, session: auth.Session):
    st.sidebar.title("🏋️ Gym Members")
    st.sidebar.caption(f"Logged in as: {session.email}")

    page = st.sidebar.radio("Navigate", list(PAGES.keys()))

    if st.sidebar.button("Logout"):
        logout()
        st.rerun()

    PAGES[page](store, session)


# --------- App entry ---------

def run():
    member_store, user_store = get_stores()
    require_login()

    if st.session_state.session is None:
        login_screen(user_store)
        return

    main_app(member_store, st.session_state.session)


if __name__ == "__main__":
    run()
