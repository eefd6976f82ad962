import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, Optional, Set
from urllib.parse import unquote

import streamlit as st
import streamlit.components.v1 as components

from infrastructure.http.errors import GatewayError
from settings import load_settings
from use_cases import bootstrap
from use_cases.bootstrap import ClientContext
from use_cases.route_guard import LOGIN_PATH

log = logging.getLogger(__name__)

"""
SESSION STATE CONTRACT

This module owns the Streamlit session state of one browser session.

Keys of st.session_state:

client: ClientContext | None
    gateway client + session store + benefit store of this browser session
    default: None
    owner: session_manager

pending_redirect: str | None
    location to open on the next rerun (set by forced session invalidation)
    default: None
    owner: session_manager

benefits_loaded, claims_loaded: bool
    whether the benefits / claims page already fetched for the current user
    default: False (reset on logout and on forced invalidation)
    owner: views

login_redirect: str | None
    page the user wanted before being sent to login
    default: None
    owner: views.login_view

callback_attempt, callback_error: str | None
    "<provider>:<code>" already sent for exchange and the error it produced
    default: None
    owner: views.login_view
"""

COOKIE_PREFIX = "redeem_"
COOKIE_MAX_AGE = 2592000  # 30 days
LOADED_FLAGS = ("benefits_loaded", "claims_loaded")


class BrowserStorage:
    """Storage port backed by browser cookies (mirrored to localStorage).

    Cookies are read once through ``st.context.cookies``; writes are injected
    as a script and also kept locally so reads within this run see them.
    """

    def __init__(self):
        self._written: Dict[str, str] = {}
        self._removed: Set[str] = set()

    def get(self, key: str) -> Optional[str]:
        if key in self._written:
            return self._written[key]
        if key in self._removed:
            return None
        try:
            raw = st.context.cookies.get(COOKIE_PREFIX + key)
        except Exception:
            # No browser context outside a script run (bare mode, tests)
            raw = None
        return unquote(raw) if raw else None

    def set(self, key: str, value: str) -> None:
        self._written[key] = value
        self._removed.discard(key)
        name = json.dumps(COOKIE_PREFIX + key)
        _run_script(
            f"""
            var name = {name};
            var value = {json.dumps(value)};
            var cookieStr = name + "=" + encodeURIComponent(value) + "; path=/; max-age={COOKIE_MAX_AGE}; SameSite=Lax";
            document.cookie = cookieStr;
            try {{ window.parent.document.cookie = cookieStr; }} catch (e) {{}}
            localStorage.setItem(name, value);
            """
        )

    def remove(self, key: str) -> None:
        self._written.pop(key, None)
        self._removed.add(key)
        name = json.dumps(COOKIE_PREFIX + key)
        _run_script(
            f"""
            var name = {name};
            var cookieStr = name + "=; path=/; max-age=0; SameSite=Lax";
            document.cookie = cookieStr;
            try {{ window.parent.document.cookie = cookieStr; }} catch (e) {{}}
            localStorage.removeItem(name);
            """
        )


def _run_script(body: str) -> None:
    components.html(f"<script>{body}</script>", height=0)


def notify_failure(error: GatewayError) -> None:
    st.toast(f"❌ {error.message}")


def _forget_loaded_pages() -> None:
    for flag in LOADED_FLAGS:
        st.session_state[flag] = False


def handle_invalidated() -> None:
    _forget_loaded_pages()
    st.session_state.pending_redirect = LOGIN_PATH


def init_session_state():
    if "pending_redirect" not in st.session_state:
        st.session_state.pending_redirect = None
    if "login_redirect" not in st.session_state:
        st.session_state.login_redirect = None
    if st.session_state.get("client") is None:
        result = bootstrap.run_startup(
            load_settings(),
            BrowserStorage(),
            notify=notify_failure,
            on_invalidated=handle_invalidated,
        )
        log.info(f"Client started: {', '.join(result.planned_steps)}")
        st.session_state.client = result.client


def get_client() -> ClientContext:
    init_session_state()
    return st.session_state.client


def current_path() -> str:
    return st.query_params.get("path") or "/"


def go_to(path: str):
    st.session_state.pending_redirect = None
    st.query_params.clear()
    st.query_params["path"] = path
    st.rerun()


def consume_pending_redirect():
    target = st.session_state.get("pending_redirect")
    if target:
        go_to(target)


def run_action(coro: Awaitable[Any]) -> Any:
    """Run a store coroutine from a page. Failures are already notified and on the store."""
    try:
        return asyncio.run(coro)
    except GatewayError:
        consume_pending_redirect()
        return None


def logout():
    client = get_client()
    client.session_store.logout()
    client.benefit_store.reset()
    _forget_loaded_pages()
    go_to("/")
