import streamlit as st

from use_cases.bootstrap import ClientContext
from use_cases.domain_models import STATUS_ACTIVE, STATUS_DELETED, STATUS_PAUSED, BenefitDraft
from utils import session_manager


def _render_benefit_row(store, benefit):
    c1, c2, c3 = st.columns([5, 2, 2])
    c1.markdown(f"**{benefit.title}**  \n{benefit.description}")
    c2.caption(f"{benefit.claimed_count}/{benefit.total_count} claimed · {benefit.status}")
    if c3.button("Details", key=f"detail_{benefit.uuid}"):
        session_manager.go_to(f"/dashboard/benefits/{benefit.uuid}")


def render_my_benefits(client: ClientContext):
    store = client.benefit_store
    st.subheader("My benefits")

    c1, c2 = st.columns([1, 1])
    if c1.button("➕ New benefit", type="primary"):
        session_manager.go_to("/dashboard/benefits/create")
    if c2.button("🔄 Refresh") or not st.session_state.get("benefits_loaded"):
        session_manager.run_action(store.fetch_my_benefits())
        st.session_state.benefits_loaded = True

    if store.error:
        st.error(store.error)

    tab_active, tab_expired, tab_all = st.tabs(["Active", "Expired", "All"])
    with tab_active:
        for benefit in store.active_benefits:
            _render_benefit_row(store, benefit)
    with tab_expired:
        for benefit in store.expired_benefits:
            _render_benefit_row(store, benefit)
    with tab_all:
        for benefit in store.my_benefits:
            _render_benefit_row(store, benefit)


def render_create_benefit(client: ClientContext):
    store = client.benefit_store
    st.subheader("Create benefit")

    with st.form("create_benefit_form"):
        title = st.text_input("Title *")
        description = st.text_area("Description")
        codes = st.text_area("Redemption codes *", help="One code per line")
        expires_at = st.date_input("Expires at", value=None)
        min_account_age = st.number_input("Minimum account age (days)", min_value=0, step=1)
        submitted = st.form_submit_button("Create")

    if not submitted:
        return

    draft = BenefitDraft(
        title=title,
        description=description,
        codes=codes.splitlines(),
        expires_at=f"{expires_at.isoformat()}T23:59:59Z" if expires_at else None,
        min_account_age=int(min_account_age),
    )
    try:
        payload = draft.to_payload()
    except ValueError as e:
        st.error(str(e))
        return

    response = session_manager.run_action(store.create_benefit(payload))
    if response:
        st.success("Benefit created.")
        if response.get("claim_url"):
            st.code(response["claim_url"])
    elif store.error:
        st.error(store.error)


def render_benefit_detail(client: ClientContext, uuid: str):
    store = client.benefit_store
    benefit = next((b for b in store.my_benefits if b.uuid == uuid), None)
    if benefit is None:
        benefit = session_manager.run_action(store.get_benefit_by_uuid(uuid))
    if benefit is None:
        st.error(store.error or "Benefit not found.")
        return

    st.subheader(benefit.title)
    st.write(benefit.description)
    st.caption(f"Status: {benefit.status} · {benefit.claimed_count}/{benefit.total_count} claimed")

    c1, c2, c3 = st.columns(3)
    for column, status, label in (
        (c1, STATUS_ACTIVE, "Activate"),
        (c2, STATUS_PAUSED, "Pause"),
        (c3, STATUS_DELETED, "Delete"),
    ):
        if column.button(label, key=f"status_{status}", disabled=benefit.status == status):
            if session_manager.run_action(store.update_benefit_status(uuid, status)):
                st.rerun()

    claims = session_manager.run_action(store.fetch_benefit_claims(uuid)) or []
    st.markdown("#### Claims")
    if not claims:
        st.info("Nobody has claimed this benefit yet.")
    st.dataframe(
        [
            {
                "User": (c.user or {}).get("username"),
                "Provider": c.oauth_provider,
                "Code": c.code,
                "Claimed at": c.claimed_at,
            }
            for c in claims
        ],
        use_container_width=True,
    )
