import streamlit as st

from use_cases import auth_flow
from use_cases.bootstrap import ClientContext
from utils import session_manager


def render_login(client: ClientContext, redirect=None):
    store = client.session_store
    if redirect:
        st.session_state.login_redirect = redirect

    st.title("🔐 Sign in to GiftRedeem")

    if store.is_authenticated:
        st.info("You are already signed in.")
        if st.button("Go to dashboard", type="primary"):
            session_manager.go_to(auth_flow.safe_redirect(st.session_state.login_redirect))
        return

    if not store.providers:
        session_manager.run_action(store.fetch_providers())

    if store.error:
        st.error(store.error)
    if not store.providers:
        st.warning("No login providers are available right now.")
        return

    for provider in store.providers:
        if st.button(f"Continue with {provider.display_name}", key=f"login_{provider.id}", use_container_width=True):
            url = session_manager.run_action(store.get_login_url(provider.id))
            if url:
                st.link_button(f"Open {provider.display_name}", url, type="primary")


def render_callback(client: ClientContext, provider: str):
    st.title("Signing you in…")
    code = st.query_params.get("code")

    # An OAuth code can be exchanged once; reruns only show the first outcome
    attempt = f"{provider}:{code}"
    if st.session_state.get("callback_attempt") != attempt:
        st.session_state.callback_attempt = attempt
        with st.spinner("Verifying login"):
            result = session_manager.run_action(
                auth_flow.complete_oauth_callback(
                    client.session_store,
                    provider,
                    code,
                    st.query_params.get("state"),
                    redirect=st.session_state.get("login_redirect"),
                )
            )

        if result is not None and result.status == "CONTINUE":
            st.session_state.login_redirect = None
            session_manager.go_to(result.redirect_to)
            return

        if result is not None and result.reason == "code_missing":
            st.session_state.callback_error = "Login failed: authorization code is missing."
        else:
            st.session_state.callback_error = client.session_store.error or "Login failed."

    st.error(st.session_state.get("callback_error") or "Login failed.")
    if st.button("Back to login"):
        session_manager.go_to("/login")
