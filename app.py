import streamlit as st
from datetime import datetime, timezone

from infrastructure.observability import setup_observability
setup_observability()

from use_cases import route_guard
from utils import session_manager
from views import benefits_view, claims_view, login_view

# Health Check (Basic load-balancer heartbeat)
if st.query_params.get("health") == "1":
    st.set_page_config(page_title="Health")
    st.write({"status": "ok", "time": datetime.now(timezone.utc).isoformat()})
    st.stop()

client = session_manager.get_client()
session = client.session_store

# Forced invalidation (401) from the previous run sends the user to login
session_manager.consume_pending_redirect()

# --- ROUTE GUARD ---
decision = route_guard.navigate(session_manager.current_path(), session.is_authenticated)
st.set_page_config(page_title=decision.title, layout="wide")

if decision.status == "REDIRECT":
    session_manager.go_to(decision.redirect_to)

match = decision.match

# A token without a profile is a valid transient state; fill it in once
if session.is_authenticated and session.user_profile is None:
    session_manager.run_action(session.fetch_user_profile())

# --- SIDEBAR ---
with st.sidebar:
    st.markdown("### 🎁 GiftRedeem")
    if session.is_authenticated:
        if session.user_profile is not None:
            st.caption(f"Signed in as **{session.user_profile.name}**")
        if st.button("My benefits", use_container_width=True):
            session_manager.go_to("/dashboard/benefits")
        if st.button("My claims", use_container_width=True):
            session_manager.go_to("/dashboard/claims")
        st.divider()
        if st.button("Sign out", key="logout_btn", type="secondary"):
            session_manager.logout()
    else:
        if st.button("Sign in", use_container_width=True):
            session_manager.go_to("/login")

# --- PAGES ---
if match.name == "home":
    st.title("🎁 GiftRedeem")
    st.write("Share redemption codes with your community and claim the ones shared with you.")
    if st.button("Open dashboard", type="primary"):
        session_manager.go_to("/dashboard/benefits")
elif match.name == "login":
    login_view.render_login(client, redirect=match.query.get("redirect"))
elif match.name == "callback":
    login_view.render_callback(client, match.params["provider"])
elif match.name in ("dashboard", "my-benefits"):
    benefits_view.render_my_benefits(client)
elif match.name == "create-benefit":
    benefits_view.render_create_benefit(client)
elif match.name == "benefit-detail":
    benefits_view.render_benefit_detail(client, match.params["uuid"])
elif match.name == "my-claims":
    claims_view.render_my_claims(client)
elif match.name == "claim-benefit":
    claims_view.render_claim_page(client, match.params["uuid"])
else:
    st.title("Page not found")
    if st.button("Back to home"):
        session_manager.go_to("/")
