from unittest.mock import MagicMock, patch

import pytest
import streamlit as st

from conftest import BASE_URL
from infrastructure.http.errors import DomainError
from infrastructure.storage.key_value_storage import InMemoryStorage
from settings import Settings
from use_cases import bootstrap
from use_cases.domain_models import Benefit
from utils import session_manager


@pytest.fixture(autouse=True)
def clean_session_state():
    st.session_state.clear()
    yield
    st.session_state.clear()


@pytest.fixture
def scripts():
    with patch("utils.session_manager._run_script") as mock_run:
        yield mock_run


def test_browser_storage_reads_cookie_value():
    fake_context = MagicMock()
    fake_context.cookies = {"redeem_token": "abc%20def"}
    with patch.object(session_manager.st, "context", fake_context):
        assert session_manager.BrowserStorage().get("token") == "abc def"


def test_browser_storage_without_context_returns_none():
    with patch.object(session_manager.st, "context", None):
        assert session_manager.BrowserStorage().get("token") is None


def test_browser_storage_set_and_remove_are_visible_immediately(scripts):
    fake_context = MagicMock()
    fake_context.cookies = {"redeem_token": "old"}
    storage = session_manager.BrowserStorage()

    with patch.object(session_manager.st, "context", fake_context):
        storage.set("token", "new")
        assert storage.get("token") == "new"

        storage.remove("token")
        assert storage.get("token") is None

    assert scripts.call_count == 2
    set_script, remove_script = (c.args[0] for c in scripts.call_args_list)
    assert '"redeem_token"' in set_script and '"new"' in set_script
    assert "max-age=0" in remove_script


@patch("utils.session_manager.BrowserStorage", side_effect=InMemoryStorage)
@patch("utils.session_manager.load_settings", return_value=Settings(api_base_url=BASE_URL))
def test_init_session_state_builds_client_once(_mock_settings, _mock_storage):
    session_manager.init_session_state()
    client = st.session_state.client

    session_manager.init_session_state()

    assert st.session_state.client is client
    assert st.session_state.pending_redirect is None
    assert st.session_state.login_redirect is None
    assert client.gateway.base_url == BASE_URL


def test_handle_invalidated_schedules_login():
    st.session_state.benefits_loaded = True
    st.session_state.claims_loaded = True

    session_manager.handle_invalidated()

    assert st.session_state.pending_redirect == "/login"
    assert st.session_state.benefits_loaded is False
    assert st.session_state.claims_loaded is False


@patch("utils.session_manager.st.toast")
def test_notify_failure_shows_toast(mock_toast):
    session_manager.notify_failure(DomainError("Benefit expired"))

    mock_toast.assert_called_once()
    assert "Benefit expired" in mock_toast.call_args.args[0]


def test_run_action_returns_coroutine_result():
    async def ok():
        return 42

    assert session_manager.run_action(ok()) == 42


@patch("utils.session_manager.go_to")
def test_run_action_swallows_gateway_error_and_follows_redirect(mock_go_to):
    st.session_state.pending_redirect = "/login"

    async def boom():
        raise DomainError("nope")

    assert session_manager.run_action(boom()) is None
    mock_go_to.assert_called_once_with("/login")


@patch("utils.session_manager.go_to")
def test_run_action_does_not_hide_programming_errors(mock_go_to):
    async def broken():
        raise KeyError("benefit")

    with pytest.raises(KeyError):
        session_manager.run_action(broken())
    mock_go_to.assert_not_called()


@patch("utils.session_manager.go_to")
def test_logout(mock_go_to):
    client = MagicMock()
    st.session_state.client = client
    st.session_state.benefits_loaded = True

    session_manager.logout()

    client.session_store.logout.assert_called_once()
    client.benefit_store.reset.assert_called_once()
    assert st.session_state.benefits_loaded is False
    mock_go_to.assert_called_once_with("/")


@patch("utils.session_manager.go_to")
def test_logout_drops_benefits_of_signed_out_user(mock_go_to):
    client = bootstrap.run_startup(
        Settings(api_base_url=BASE_URL), InMemoryStorage({"token": "t1"}), http_session=MagicMock()
    ).client
    client.benefit_store.my_benefits = [Benefit("a1", "active", {"title": "A only"})]
    st.session_state.client = client
    st.session_state.claims_loaded = True

    session_manager.logout()

    assert client.session_store.is_authenticated is False
    assert client.benefit_store.my_benefits == []
    assert st.session_state.claims_loaded is False
