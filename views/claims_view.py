import streamlit as st

from use_cases.bootstrap import ClientContext
from utils import session_manager


def render_my_claims(client: ClientContext):
    store = client.benefit_store
    st.subheader("My claims")

    if st.button("🔄 Refresh") or not st.session_state.get("claims_loaded"):
        session_manager.run_action(store.fetch_my_claims())
        st.session_state.claims_loaded = True

    if store.error:
        st.error(store.error)
    if not store.my_claims:
        st.info("You have not claimed any benefits yet.")
        return

    for claim in store.my_claims:
        benefit = claim.benefit or {}
        with st.container(border=True):
            st.markdown(f"**{benefit.get('title', '')}**")
            st.code(claim.code or "")
            st.caption(f"Claimed at {claim.claimed_at} via {claim.oauth_provider}")


def render_claim_page(client: ClientContext, uuid: str):
    benefits = client.benefit_store
    session = client.session_store

    benefit = session_manager.run_action(benefits.get_benefit_by_uuid(uuid))
    if benefit is None:
        st.error(benefits.error or "Benefit not found.")
        return

    st.title(f"🎁 {benefit.title}")
    st.write(benefit.description)
    st.caption(f"{benefit.claimed_count}/{benefit.total_count} claimed")

    if not session.is_authenticated:
        st.info("Sign in to claim this benefit.")
        if st.button("Sign in", type="primary"):
            st.session_state.login_redirect = f"/claim/{uuid}"
            session_manager.go_to("/login")
        return

    if st.button("Claim", type="primary"):
        response = session_manager.run_action(benefits.claim_benefit(uuid))
        if response:
            claim = response.get("claim") or {}
            st.success("Claimed!")
            if claim.get("code"):
                st.code(claim["code"])
            # my_claims is only refreshed on the next visit of the claims page
            st.session_state.claims_loaded = False
        elif benefits.error:
            st.error(benefits.error)
